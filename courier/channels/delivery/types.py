"""Data model shared by every stage of the delivery pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from courier.channels.protocol import Artifact
from courier.core.errors import ConfigError

FENCE = "```"

DEFAULT_MAX_LENGTH = 2000
DEFAULT_INTER_MESSAGE_DELAY_MS = 1200
DEFAULT_ARTIFACT_TTL_SECONDS = 60.0
MIN_ATTACHMENT_THRESHOLD = 100
# Smallest limit that holds a bare fence pair around one character
MIN_MAX_LENGTH = len(f"{FENCE}\n\n{FENCE}") + 1


class SegmentKind(str, Enum):
    TEXT = "text"
    CODE = "code"


class UnitKind(str, Enum):
    TEXT = "text"
    CODEBLOCK = "codeblock"
    CODEBLOCK_ATTACHMENT = "codeblock-attachment"
    CODEBLOCK_SPLIT = "codeblock-split"


@dataclass(frozen=True)
class Segment:
    """One contiguous span of a response, in original order.

    ``raw`` keeps the fence lines for code segments; ``body`` is the code
    between them. ``start``/``end`` are offsets into the scanned text.
    """

    kind: SegmentKind
    raw: str
    language: str = ""
    body: str = ""
    start: int = 0
    end: int = 0

    @property
    def is_code(self) -> bool:
        return self.kind is SegmentKind.CODE


ArtifactFactory = Callable[[str, str], Awaitable[Artifact]]


@dataclass
class DeliverableUnit:
    """One platform-ready message.

    ``part_index``/``part_count`` are display hints for split code blocks;
    ordering is carried by queue position alone.
    """

    content: str
    kind: UnitKind = UnitKind.TEXT
    attachment: Artifact | None = None
    language: str = ""
    part_index: int | None = None
    part_count: int | None = None

    @property
    def attachments(self) -> list[Artifact]:
        return [self.attachment] if self.attachment is not None else []


def default_attachment_threshold(max_length: int) -> int:
    return max(int(max_length * 0.8), min(MIN_ATTACHMENT_THRESHOLD, max_length))


@dataclass(frozen=True)
class DeliveryConfig:
    """Tunables for one delivery.

    Attributes:
        max_length: Hard per-message size limit of the transport.
        attachment_threshold: Largest code block (fences included) sent
            inline. Defaults to 80% of ``max_length``.
        inter_message_delay_ms: Pause before every message after the first.
        stop_on_failure: Abort on the first failed send. When False the
            remaining units are still sent and the first failure is raised
            afterwards.
        artifact_ttl_seconds: Grace period before a code artifact is deleted.
    """

    max_length: int = DEFAULT_MAX_LENGTH
    attachment_threshold: int | None = None
    inter_message_delay_ms: int = DEFAULT_INTER_MESSAGE_DELAY_MS
    stop_on_failure: bool = True
    artifact_ttl_seconds: float = DEFAULT_ARTIFACT_TTL_SECONDS

    def __post_init__(self) -> None:
        if self.max_length < MIN_MAX_LENGTH:
            raise ConfigError(
                f"max_length must be at least {MIN_MAX_LENGTH}", field="max_length"
            )
        if self.attachment_threshold is None:
            object.__setattr__(
                self, "attachment_threshold", default_attachment_threshold(self.max_length)
            )
        if not 0 < self.attachment_threshold <= self.max_length:
            raise ConfigError(
                "attachment_threshold must be in (0, max_length]",
                field="attachment_threshold",
            )
        if self.inter_message_delay_ms < 0:
            raise ConfigError(
                "inter_message_delay_ms must not be negative",
                field="inter_message_delay_ms",
            )
        if self.artifact_ttl_seconds < 0:
            raise ConfigError(
                "artifact_ttl_seconds must not be negative",
                field="artifact_ttl_seconds",
            )

    @property
    def inter_message_delay(self) -> float:
        return self.inter_message_delay_ms / 1000
