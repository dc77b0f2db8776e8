# app/utils/logging.py
import logging
import sys

from app.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _configure_root() -> None:
    root = logging.getLogger("app")
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    root.setLevel(LOG_LEVEL.upper())


def get_logger(name: str) -> logging.Logger:
    _configure_root()
    return logging.getLogger(name)
