# backend/market_sum/logger.py
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from market_sum.core.config import settings

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _level() -> int:
    return getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """
    Logger with a console handler and, when LOG_TO_FILE is on, a rotating
    file under backend/logs. Handlers are attached once per name.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(_level())

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if settings.LOG_TO_FILE:
        LOG_DIR.mkdir(exist_ok=True, parents=True)
        rotating = RotatingFileHandler(LOG_DIR / "market_sum.log", maxBytes=2_000_000, backupCount=5)
        rotating.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(rotating)
    return logger
