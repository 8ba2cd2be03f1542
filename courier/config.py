import os
from pathlib import Path

from dotenv import load_dotenv

from courier.channels.delivery.types import (
    DEFAULT_ARTIFACT_TTL_SECONDS,
    DEFAULT_INTER_MESSAGE_DELAY_MS,
    DEFAULT_MAX_LENGTH,
    DeliveryConfig,
)
from courier.core.logging import get_logger

_log = get_logger("config")

load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent.resolve()
DATA_ROOT = Path(os.getenv("COURIER_DATA_DIR", PROJECT_ROOT / "data"))
LOGS_DIR = Path(os.getenv("LOG_DIR", PROJECT_ROOT / "logs"))


def _get_int_env(name: str, default: int) -> int:
    """Get integer value from environment variable.

    Args:
        name: Environment variable name
        default: Default value if not set or invalid

    Returns:
        Integer value from env or default
    """
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        _log.warning("Invalid int env", env=name, value=raw)
        return default


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        _log.warning("Invalid float env", env=name, value=raw)
        return default


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


DELIVERY_MAX_LENGTH = _get_int_env("DELIVERY_MAX_LENGTH", DEFAULT_MAX_LENGTH)
# 0 means "80% of DELIVERY_MAX_LENGTH"
DELIVERY_ATTACHMENT_THRESHOLD = _get_int_env("DELIVERY_ATTACHMENT_THRESHOLD", 0)
DELIVERY_INTER_MESSAGE_DELAY_MS = _get_int_env(
    "DELIVERY_INTER_MESSAGE_DELAY_MS", DEFAULT_INTER_MESSAGE_DELAY_MS
)
DELIVERY_STOP_ON_FAILURE = _get_bool_env("DELIVERY_STOP_ON_FAILURE", True)

ARTIFACT_DIR = Path(os.getenv("ARTIFACT_DIR", DATA_ROOT / "tmp" / "code-attachments"))
ARTIFACT_TTL_SECONDS = _get_float_env("ARTIFACT_TTL_SECONDS", DEFAULT_ARTIFACT_TTL_SECONDS)


def default_delivery_config() -> DeliveryConfig:
    """Build the delivery config from environment settings."""
    return DeliveryConfig(
        max_length=DELIVERY_MAX_LENGTH,
        attachment_threshold=DELIVERY_ATTACHMENT_THRESHOLD or None,
        inter_message_delay_ms=DELIVERY_INTER_MESSAGE_DELAY_MS,
        stop_on_failure=DELIVERY_STOP_ON_FAILURE,
        artifact_ttl_seconds=ARTIFACT_TTL_SECONDS,
    )


def ensure_data_directories() -> None:
    """Create required data directories if they don't exist."""
    for directory in (DATA_ROOT, ARTIFACT_DIR, LOGS_DIR):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            _log.warning("Failed to create directory", path=str(directory), error=str(e))


def default_artifact_store(delivery_config: DeliveryConfig | None = None):
    """Artifact store rooted at ``ARTIFACT_DIR``.

    The TTL comes from ``delivery_config.artifact_ttl_seconds``, or from the
    environment-built config when none is given.
    """
    from courier.channels.delivery.artifacts import ArtifactStore

    config = delivery_config or default_delivery_config()
    return ArtifactStore(ARTIFACT_DIR, ttl_seconds=config.artifact_ttl_seconds)
