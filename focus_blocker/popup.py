import customtkinter as ctk

from .config import POPUP_HEIGHT, POPUP_TITLE, POPUP_WIDTH


def _open_window(title: str, message: str) -> None:
    """Open a topmost window and block until the user dismisses it.

    Runs its own Tk root, so call it from a worker thread.
    """
    root = ctk.CTk()
    root.title(title)
    root.geometry(f"{POPUP_WIDTH}x{POPUP_HEIGHT}")
    root.resizable(False, False)
    root.attributes("-topmost", True)

    body = ctk.CTkLabel(
        root,
        text=message,
        wraplength=POPUP_WIDTH - 40,
        justify="left",
        font=ctk.CTkFont(size=14),
    )
    body.pack(padx=20, pady=(20, 10), fill="both", expand=True)

    ok = ctk.CTkButton(root, text="OK", width=120, command=root.destroy)
    ok.pack(pady=(0, 20))

    root.protocol("WM_DELETE_WINDOW", root.destroy)
    root.after(0, root.focus_force)
    root.mainloop()


def show_blocked(app_name: str, message: str) -> None:
    body = f"Application closed: {app_name}\n\n{message}\n\nStay focused and keep going!"
    _open_window(POPUP_TITLE, body)


def show_info(title: str, message: str) -> None:
    _open_window(title, message)
