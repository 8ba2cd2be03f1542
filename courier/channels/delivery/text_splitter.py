"""Boundary-quality splitting of plain text into size-limited pieces.

Each step looks only at the next ``max_length`` characters (the window) and
picks the best break inside it:

1. paragraph break past 40% of the window
2. sentence end (``. ``, ``! ``, ``? `` or the terminator before a newline)
   past 50%
3. newline past 30%
4. space past 30%
5. hard cut at the window end

The floors keep a stray early boundary from producing a near-empty message.
"""

from __future__ import annotations

PARAGRAPH_FLOOR = 0.4
SENTENCE_FLOOR = 0.5
NEWLINE_FLOOR = 0.3
SPACE_FLOOR = 0.3

SENTENCE_ENDERS = (". ", "! ", "? ", ".\n", "!\n", "?\n")


def find_break_point(window: str) -> int:
    """Return the index just past the best boundary in ``window``.

    Falls back to ``len(window)`` (hard cut) when no boundary clears its floor.
    """
    length = len(window)

    paragraph = window.rfind("\n\n")
    if paragraph > length * PARAGRAPH_FLOOR:
        return paragraph + 2

    best_sentence = -1
    for ender in SENTENCE_ENDERS:
        pos = window.rfind(ender)
        if pos > length * SENTENCE_FLOOR and pos + len(ender) > best_sentence:
            best_sentence = pos + len(ender)
    if best_sentence > -1:
        return best_sentence

    newline = window.rfind("\n")
    if newline > length * NEWLINE_FLOOR:
        return newline + 1

    space = window.rfind(" ")
    if space > length * SPACE_FLOOR:
        return space + 1

    return length


def split_text(text: str, max_length: int) -> list[str]:
    """Split ``text`` into pieces of at most ``max_length`` characters.

    Pieces are whitespace-trimmed and never empty. Joining them with single
    spaces yields the original word sequence; only a hard cut (a run with no
    usable boundary) can break a word in two.

    Raises:
        ValueError: If ``max_length`` is not positive.
    """
    if max_length <= 0:
        raise ValueError(f"max_length must be positive, got {max_length}")

    pieces: list[str] = []
    remaining = text.strip()

    while len(remaining) > max_length:
        cut = find_break_point(remaining[:max_length])
        piece = remaining[:cut].strip()
        if piece:
            pieces.append(piece)
        remaining = remaining[cut:].strip()

    if remaining:
        pieces.append(remaining)

    return pieces
