from .constants import (
    Colors,
    MODULE_ABBREV,
    MODULE_COLORS,
    get_delivery_id,
    reset_delivery_id,
    set_delivery_id,
)
from .formatters import JsonFormatter, PlainFormatter, SmartFormatter
from .structured_logger import StructuredLogger, get_logger, set_log_level
from .error_monitor import ErrorMonitor, error_monitor

__all__ = [

    "get_logger",
    "StructuredLogger",
    "SmartFormatter",
    "PlainFormatter",
    "JsonFormatter",
    "Colors",
    "MODULE_COLORS",
    "MODULE_ABBREV",
    "set_delivery_id",
    "reset_delivery_id",
    "get_delivery_id",
    "set_log_level",
    "ErrorMonitor",
    "error_monitor",
]
