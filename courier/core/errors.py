"""
Typed error hierarchy for the delivery pipeline.

Only errors the pipeline itself produces live here. Transport exceptions
(``discord.HTTPException`` and friends) are never wrapped: they propagate to
the caller unchanged so one retry/report policy applies to every failure.
"""

import time
from abc import ABC, abstractmethod
from typing import Any


class CourierError(Exception, ABC):
    """Abstract base for all typed application errors."""

    @abstractmethod
    def _abstract_guard(self) -> None: ...

    @property
    @abstractmethod
    def is_retryable(self) -> bool: ...

    def __init__(self, message: str, *, code: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.code = code or type(self).__name__.upper()
        self.timestamp = time.time()

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "is_retryable": self.is_retryable,
            "timestamp": self.timestamp,
        }


class TransientError(CourierError):
    is_retryable: bool = True

    def _abstract_guard(self) -> None: ...

    def __init__(self, message: str, *, code: str = "TRANSIENT", **kw: Any) -> None:
        super().__init__(message, code=code, **kw)


class PermanentError(CourierError):
    is_retryable: bool = False

    def _abstract_guard(self) -> None: ...

    def __init__(self, message: str, *, code: str = "PERMANENT", **kw: Any) -> None:
        super().__init__(message, code=code, **kw)


class ConfigError(PermanentError):
    """Delivery settings that cannot produce valid messages."""

    def __init__(self, message: str, *, field: str | None = None, **kw: Any) -> None:
        super().__init__(message, code="CONFIG", **kw)
        self.field = field


class ArtifactError(TransientError):
    """A file artifact could not be written. Recovered by splitting inline."""

    def __init__(self, message: str, *, language: str = "", **kw: Any) -> None:
        super().__init__(message, code="ARTIFACT", **kw)
        self.language = language


class CleanupError(TransientError):
    """A temporary artifact could not be deleted.

    Never raised out of the pipeline; it is reported to the error monitor and
    to the store's ``on_cleanup_error`` hook instead.
    """

    def __init__(self, message: str, *, path: str, **kw: Any) -> None:
        super().__init__(message, code="CLEANUP", **kw)
        self.path = path

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["path"] = self.path
        return data
