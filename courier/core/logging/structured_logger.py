import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from .constants import DEFAULT_LEVEL, LOG_JSON, LOG_LEVEL_MAP
from .formatters import JsonFormatter, PlainFormatter, SmartFormatter


def _configure_root_logger():

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if not root.handlers:
        root.addHandler(logging.NullHandler())


_configure_root_logger()


def _log_dir() -> Path:
    return Path(os.getenv("LOG_DIR", Path(__file__).parent.parent.parent.parent / "logs"))


class StructuredLogger:

    def __init__(self, name: str, level: Optional[int] = None):
        self._logger = logging.getLogger(name)
        effective_level = level or DEFAULT_LEVEL
        self._logger.setLevel(effective_level)

        if not self._logger.handlers:

            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(SmartFormatter(use_colors=True))
            console.setLevel(effective_level)
            self._logger.addHandler(console)

            log_dir = _log_dir()
            if log_dir.exists():
                try:
                    fh = RotatingFileHandler(
                        log_dir / "courier.log",
                        encoding="utf-8",
                        maxBytes=10 * 1024 * 1024,
                        backupCount=5
                    )
                    fh.setFormatter(PlainFormatter())
                    fh.setLevel(logging.DEBUG)
                    self._logger.addHandler(fh)
                except OSError as e:
                    console.handle(self._make_record(
                        logging.WARNING, "Log file unavailable", {"error": str(e)}
                    ))

            if LOG_JSON and log_dir.exists():
                try:
                    jh = logging.FileHandler(log_dir / "courier.jsonl", encoding="utf-8")
                    jh.setFormatter(JsonFormatter())
                    jh.setLevel(logging.INFO)
                    self._logger.addHandler(jh)
                except OSError as e:
                    console.handle(self._make_record(
                        logging.WARNING, "JSON log file unavailable", {"error": str(e)}
                    ))

            self._logger.propagate = False

    def _make_record(self, level: int, msg: str, extra: dict[str, Any], exc_info=None) -> logging.LogRecord:
        record = self._logger.makeRecord(
            self._logger.name, level, "", 0, msg, (), exc_info
        )
        record.extra_data = extra
        return record

    def _log(self, level: int, msg: str, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.handle(self._make_record(level, msg, kwargs))
        if level >= logging.WARNING:
            for h in self._logger.handlers:
                h.flush()

    def debug(self, msg: str, **kwargs) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs) -> None:
        self._log(logging.ERROR, msg, **kwargs)

    def critical(self, msg: str, **kwargs) -> None:
        self._log(logging.CRITICAL, msg, **kwargs)

    def exception(self, msg: str, **kwargs) -> None:

        self._logger.handle(self._make_record(logging.ERROR, msg, kwargs, sys.exc_info()))


_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str = "courier") -> StructuredLogger:

    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def set_log_level(level: str) -> None:

    numeric = LOG_LEVEL_MAP.get(level.upper(), logging.DEBUG)
    for logger in _loggers.values():
        logger._logger.setLevel(numeric)
        for h in logger._logger.handlers:
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
                h.setLevel(numeric)
