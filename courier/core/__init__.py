from .errors import (
    ArtifactError,
    CleanupError,
    ConfigError,
    CourierError,
    PermanentError,
    TransientError,
)

__all__ = [
    "CourierError",
    "TransientError",
    "PermanentError",
    "ConfigError",
    "ArtifactError",
    "CleanupError",
]
