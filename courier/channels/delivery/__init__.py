"""Outbound response delivery pipeline.

Turns one raw AI response into platform-sized messages:

1. Segmenter - text and fenced code spans
2. Text splitter - boundary-quality splitting of prose
3. Code policy - inline, attachment, or fenced split parts
4. Sequencer - ordered, paced sends with typing signals
"""

from .artifacts import ArtifactStore, FileArtifact, language_extension
from .code_policy import place_code_block, split_code_block
from .diagrams import DiagramRenderer, render_diagrams
from .pipeline import DeliveryCoordinator, build_units, deliver_response, sanitize
from .segmenter import join_segments, segment
from .sequencer import deliver
from .text_splitter import find_break_point, split_text
from .types import (
    DeliverableUnit,
    DeliveryConfig,
    Segment,
    SegmentKind,
    UnitKind,
)

__all__ = [
    "ArtifactStore",
    "FileArtifact",
    "language_extension",
    "place_code_block",
    "split_code_block",
    "DiagramRenderer",
    "render_diagrams",
    "DeliveryCoordinator",
    "build_units",
    "deliver_response",
    "sanitize",
    "segment",
    "join_segments",
    "deliver",
    "find_break_point",
    "split_text",
    "DeliverableUnit",
    "DeliveryConfig",
    "Segment",
    "SegmentKind",
    "UnitKind",
]
