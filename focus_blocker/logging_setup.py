import logging
import sys
from logging.handlers import RotatingFileHandler

from .config import LOG_DIR, LOG_FILE
from .utils import ensure_dir

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_logger(
    log_file: str = LOG_FILE,
    log_dir: str = LOG_DIR,
    console: bool = False,
) -> logging.Logger:
    """Rotating file log, plus stderr when started from a terminal."""
    ensure_dir(log_dir)
    logger = logging.getLogger("FocusBlocker")
    logger.setLevel(logging.INFO)
    fmt = logging.Formatter(LOG_FORMAT)

    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        handler = RotatingFileHandler(
            log_file,
            maxBytes=1_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    # RotatingFileHandler is itself a StreamHandler subclass
    has_console = any(type(h) is logging.StreamHandler for h in logger.handlers)
    if console and not has_console:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(fmt)
        logger.addHandler(stream)

    return logger
