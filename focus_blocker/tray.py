import pystray
from PIL import Image, ImageDraw

ACTIVE_COLOR = (200, 60, 60)
IDLE_COLOR = (90, 160, 90)
DISABLED_COLOR = (130, 130, 130)


class TrayController:
    def __init__(self, title: str, on_toggle, on_reload, on_quit):
        self._title = title
        self._on_toggle = on_toggle
        self._on_reload = on_reload
        self._on_quit = on_quit

        self._icon = None
        self._enabled = False
        self._productive = False

    def _make_icon_image(self) -> Image.Image:
        if not self._enabled:
            color = DISABLED_COLOR
        elif self._productive:
            color = ACTIVE_COLOR
        else:
            color = IDLE_COLOR
        img = Image.new("RGB", (64, 64), color=(40, 40, 40))
        draw = ImageDraw.Draw(img)
        draw.rounded_rectangle((10, 10, 54, 54), radius=10, fill=color)
        draw.rectangle((26, 20, 38, 44), fill=(245, 245, 245))
        return img

    def _status_text(self) -> str:
        if not self._enabled:
            return f"{self._title} - disabled"
        if self._productive:
            return f"{self._title} - productive time, blocking active"
        return f"{self._title} - idle"

    def _refresh(self) -> None:
        if self._icon is None:
            return
        self._icon.icon = self._make_icon_image()
        self._icon.title = self._status_text()
        self._icon.update_menu()

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        self._refresh()

    def set_productive(self, productive: bool) -> None:
        self._productive = productive
        self._refresh()

    def run(self) -> None:
        """Blocks until stop(); must be called on the main thread."""

        def on_toggle(icon, item):
            self._on_toggle()

        def on_reload(icon, item):
            self._on_reload()

        def on_quit(icon, item):
            self._on_quit()

        menu = pystray.Menu(
            pystray.MenuItem(lambda item: self._status_text(), None, enabled=False),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Blocking enabled", on_toggle, checked=lambda item: self._enabled),
            pystray.MenuItem("Reload config", on_reload),
            pystray.MenuItem("Quit", on_quit),
        )

        self._icon = pystray.Icon("FocusBlocker", self._make_icon_image(), self._status_text(), menu)
        self._icon.run()

    def stop(self) -> None:
        if self._icon is None:
            return
        try:
            self._icon.stop()
        except Exception:
            pass
