"""Content segmenter: partitions a raw response into text and code spans.

A single forward pass over the lines of the response drives a two-state
machine (outside a fence / inside a fence). A fence opens on a line that
starts with three backticks and closes on a line that is exactly three
backticks. An opening fence that never closes is rolled back: the marker and
everything after it stay plain text, since guessing a close point would cut
user-visible code.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator

from courier.channels.delivery.types import FENCE, Segment, SegmentKind
from courier.core.logging import get_logger

_log = get_logger("channels.delivery.segmenter")


class _State(Enum):
    OUTSIDE_FENCE = "outside"
    IN_FENCE = "in_fence"


def _lines(text: str) -> Iterator[tuple[int, int, str]]:
    """Yield ``(start, end, line)`` for every line, ``end`` excluding the newline."""
    pos = 0
    length = len(text)
    while pos <= length:
        nl = text.find("\n", pos)
        end = length if nl == -1 else nl
        yield pos, end, text[pos:end]
        if nl == -1:
            return
        pos = nl + 1


def _opening_language(line: str) -> str | None:
    """Language tag if ``line`` opens a fence, else None."""
    stripped = line.strip()
    if not stripped.startswith(FENCE):
        return None
    rest = stripped[len(FENCE):]
    # ```inline``` on one line is inline code, not a fence
    if FENCE in rest:
        return None
    return rest.strip()


def _is_closing(line: str) -> bool:
    return line.strip() == FENCE


def _text_segment(text: str, start: int, end: int) -> Segment | None:
    span = text[start:end]
    trimmed = span.strip()
    if not trimmed:
        return None
    return Segment(kind=SegmentKind.TEXT, raw=trimmed, start=start, end=end)


def segment(text: str) -> list[Segment]:
    """Split ``text`` into ordered text/code segments.

    Args:
        text: Raw response text.

    Returns:
        Segments in left-to-right order. Text segments are trimmed and never
        empty; whitespace-only input yields an empty list.
    """
    if not text or not text.strip():
        return []

    segments: list[Segment] = []
    state = _State.OUTSIDE_FENCE
    text_start = 0
    fence_start = 0
    body_start = 0
    language = ""

    for start, end, line in _lines(text):
        if state is _State.OUTSIDE_FENCE:
            lang = _opening_language(line)
            if lang is None:
                continue
            fence_start = start + (len(line) - len(line.lstrip()))
            body_start = min(end + 1, len(text))
            language = lang
            state = _State.IN_FENCE
            continue

        if not _is_closing(line):
            continue

        before = _text_segment(text, text_start, fence_start)
        if before is not None:
            segments.append(before)

        close_end = start + line.index(FENCE) + len(FENCE)
        body = text[body_start:start]
        for ending in ("\r\n", "\n"):
            if body.endswith(ending):
                body = body[:-len(ending)]
                break
        segments.append(Segment(
            kind=SegmentKind.CODE,
            raw=text[fence_start:close_end],
            language=language,
            body=body,
            start=fence_start,
            end=close_end,
        ))
        text_start = close_end
        state = _State.OUTSIDE_FENCE

    if state is _State.IN_FENCE:
        # Roll back to the offset before the dangling fence
        _log.info(
            "Unterminated code fence treated as text",
            offset=fence_start,
            language=language or None,
        )

    tail = _text_segment(text, text_start, len(text))
    if tail is not None:
        segments.append(tail)

    return segments


def join_segments(segments: list[Segment]) -> str:
    """Rebuild canonical text from segments (blank line between spans)."""
    return "\n\n".join(s.raw for s in segments)
