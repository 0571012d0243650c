import os

APP_TITLE = "Focus Blocker"
APPDATA_DIR = os.path.join(os.getenv("APPDATA") or os.path.expanduser("~"), "FocusBlocker")

CONFIG_FILE = os.path.join(APPDATA_DIR, "config.json")
ENV_FILE = os.path.join(APPDATA_DIR, ".env")
LOCK_FILE_NAME = "focus_blocker.lock"

LOG_DIR = os.path.join(APPDATA_DIR, "logs")
LOG_FILE = os.path.join(LOG_DIR, "focus_blocker.log")

# Schedule boundaries are minute-granular, so this tick is fixed
SCHEDULE_TICK_SEC = 30.0
TERMINATE_GRACE_SEC = 1.5
STOP_JOIN_TIMEOUT_SEC = 5.0

# Message provider
GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
GEMINI_API_KEY_ENV = "GEMINI_API_KEY"
DEFAULT_MODEL = "gemini-3-flash-preview"
MESSAGE_TIMEOUT_SEC = 8.0
DEFAULT_MESSAGE = (
    "Stay focused! This is your productive time. "
    "Close the distractions and get back to your work."
)

POPUP_TITLE = "Focus Blocker - Productive Time!"
POPUP_WIDTH = 440
POPUP_HEIGHT = 260

# Defaults written on first run
DEFAULT_SCAN_INTERVAL_SEC = 5
DEFAULT_COOLDOWN_SEC = 60
DEFAULT_ACTIVE_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri")
DEFAULT_TIME_WINDOWS = (
    ("09:00", "12:00"),
    ("13:00", "17:00"),
    ("19:00", "21:00"),
)
DEFAULT_BLOCKLIST = ("chrome.exe", "discord.exe", "telegram.exe")
