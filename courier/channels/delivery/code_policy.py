"""Placement policy for fenced code blocks.

A block is sent inline when it fits under the attachment threshold. Larger
blocks become a file artifact with a short placeholder message. When no
artifact can be made, the body is split by line into self-contained fenced
parts, each within the message limit.
"""

from __future__ import annotations

from courier.channels.delivery.types import (
    FENCE,
    ArtifactFactory,
    DeliverableUnit,
    DeliveryConfig,
    Segment,
    UnitKind,
)
from courier.core.errors import ConfigError
from courier.core.logging import error_monitor, get_logger

_log = get_logger("channels.delivery.code_policy")

PLACEHOLDER_TEXT = "[Code too large - see attachment]"
SHORT_PLACEHOLDER_TEXT = "[attached]"


def fence(body: str, language: str = "") -> str:
    return f"{FENCE}{language}\n{body}\n{FENCE}"


def _fence_overhead(language: str) -> int:
    return len(fence("", language))


def placeholder(language: str, filename: str, max_length: int) -> str | None:
    """Visible message for a block that was moved into an attachment.

    Returns the most descriptive form that fits ``max_length``, or None when
    not even the bare form does.
    """
    candidates = [
        fence(f"[Code too large - see attachment: {filename}]", language),
        fence(PLACEHOLDER_TEXT, language),
        fence(PLACEHOLDER_TEXT),
        fence(SHORT_PLACEHOLDER_TEXT),
    ]
    for text in candidates:
        if len(text) <= max_length:
            return text
    return None


def _hard_cut(line: str, capacity: int) -> list[str]:
    return [line[i:i + capacity] for i in range(0, len(line), capacity)] or [""]


def split_code_block(body: str, language: str, max_length: int) -> list[DeliverableUnit]:
    """Break ``body`` into fenced parts that each fit ``max_length``.

    Lines accumulate into a part until the next line would push the fenced
    part past the limit. A single line longer than a part can hold is cut at
    capacity. Joining part bodies with newlines restores ``body`` wherever no
    line had to be cut.
    """
    capacity = max_length - _fence_overhead(language)
    if capacity < 1 and language:
        _log.warning("Language tag dropped to fit split parts", language=language)
        language = ""
        capacity = max_length - _fence_overhead(language)
    if capacity < 1:
        raise ConfigError(
            f"max_length {max_length} cannot hold a fenced code part",
            field="max_length",
        )

    chunks: list[str] = []
    current: list[str] = []
    current_len = -1  # no separator before the first line

    for line in body.split("\n"):
        for piece in _hard_cut(line, capacity):
            added = len(piece) + 1
            if current and current_len + added > capacity:
                chunks.append("\n".join(current))
                current = []
                current_len = -1
            current.append(piece)
            current_len += added

    if current:
        chunks.append("\n".join(current))

    total = len(chunks)
    return [
        DeliverableUnit(
            content=fence(chunk, language),
            kind=UnitKind.CODEBLOCK_SPLIT,
            language=language,
            part_index=i + 1,
            part_count=total,
        )
        for i, chunk in enumerate(chunks)
    ]


async def place_code_block(
    segment: Segment,
    config: DeliveryConfig,
    create_artifact: ArtifactFactory | None = None,
) -> list[DeliverableUnit]:
    """Decide how one code segment is delivered.

    Args:
        segment: A code segment from the segmenter.
        config: Delivery limits.
        create_artifact: Optional ``(body, language) -> Artifact`` coroutine.

    Returns:
        One ``codeblock`` or ``codeblock-attachment`` unit, or one
        ``codeblock-split`` unit per part.
    """
    if len(segment.raw) <= config.attachment_threshold:
        return [DeliverableUnit(
            content=segment.raw,
            kind=UnitKind.CODEBLOCK,
            language=segment.language,
        )]

    if create_artifact is not None:
        try:
            artifact = await create_artifact(segment.body, segment.language)
        except Exception as e:
            _log.warning(
                "Code attachment failed, splitting inline",
                language=segment.language or None,
                length=len(segment.body),
                error=str(e),
            )
            error_monitor.record("artifact", str(e))
        else:
            content = placeholder(segment.language, artifact.filename, config.max_length)
            if content is not None:
                _log.info(
                    "Code block moved to attachment",
                    language=segment.language or None,
                    length=len(segment.body),
                    file=artifact.filename,
                )
                return [DeliverableUnit(
                    content=content,
                    kind=UnitKind.CODEBLOCK_ATTACHMENT,
                    attachment=artifact,
                    language=segment.language,
                )]
            # TTL cleanup still reclaims the unused file
            _log.warning("Attachment placeholder exceeds max_length", max_length=config.max_length)

    units = split_code_block(segment.body, segment.language, config.max_length)
    _log.info(
        "Code block split inline",
        language=segment.language or None,
        length=len(segment.body),
        parts=len(units),
    )
    return units
