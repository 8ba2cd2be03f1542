import logging
import os
import sys
from contextvars import ContextVar
from typing import Optional
from zoneinfo import ZoneInfo

LOG_TZ = ZoneInfo(os.getenv("TZ", "UTC") or "UTC")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
DEFAULT_LEVEL = LOG_LEVEL_MAP.get(LOG_LEVEL, logging.INFO)
LOG_JSON = os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes")

# Correlates every log line emitted while one response is being delivered.
_delivery_id: ContextVar[Optional[str]] = ContextVar("delivery_id", default=None)


def set_delivery_id(delivery_id: str):
    return _delivery_id.set(delivery_id)


def reset_delivery_id(token) -> None:
    _delivery_id.reset(token)


def get_delivery_id() -> Optional[str]:
    return _delivery_id.get()


MODULE_COLORS = {
    "channels": "\033[94m",
    "core":     "\033[96m",
    "config":   "\033[93m",
}

MODULE_ABBREV = {
    "channels": "CHN",
    "core": "COR",
    "config": "CFG",
}


class Colors:

    @staticmethod
    def _enabled() -> bool:

        if os.getenv("NO_COLOR"):
            return False
        return sys.stdout.isatty()

    @classmethod
    def get(cls, color_code: str) -> str:
        return color_code if cls._enabled() else ""


_COLORS = {
    "RESET": "\033[0m",
    "BOLD": "\033[1m",
    "DIM": "\033[2m",
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
    "TIME": "\033[90m",
    "MODULE": "\033[34m",
    "KEY": "\033[90m",
    "VALUE": "\033[37m",
    "UNIT": "\033[95m",
    "SIZE": "\033[96m",
    "SUCCESS": "\033[92m",
    "SEPARATOR": "\033[90m",
}

LEVEL_STYLES = {
    "DEBUG": ("DEBUG", "DEBUG"),
    "INFO": (" INFO", "INFO"),
    "WARNING": (" WARN", "WARNING"),
    "ERROR": ("ERROR", "ERROR"),
    "CRITICAL": ("CRIT!", "CRITICAL"),
}
