import os
import datetime

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def weekday_name(when: datetime.datetime) -> str:
    # strftime("%a") follows the locale, the config file does not
    return WEEKDAYS[when.weekday()]


def minutes_since_midnight(when: datetime.datetime | datetime.time) -> int:
    return when.hour * 60 + when.minute


def parse_hhmm(text: str) -> int | None:
    """Return minutes since midnight for an "HH:MM" string, or None if malformed."""
    try:
        parsed = datetime.datetime.strptime(str(text).strip(), "%H:%M")
    except ValueError:
        return None
    return minutes_since_midnight(parsed)


def clock_str(when: datetime.datetime) -> str:
    return when.strftime("%H:%M")
