"""Rendered diagrams as side artifacts.

Responses may carry ``mermaid`` fences. When a renderer is available each
one is rendered to an image that rides along with the final message; the
fenced source is still delivered as code. Rendering is best effort: a failed
diagram is logged and skipped, never surfaced to the user.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from courier.channels.delivery.types import Segment
from courier.channels.protocol import Artifact
from courier.core.logging import error_monitor, get_logger

_log = get_logger("channels.delivery.diagrams")

DIAGRAM_LANGUAGES = frozenset({"mermaid"})


@runtime_checkable
class DiagramRenderer(Protocol):
    """External renderer turning diagram source into an image file."""

    async def render(self, source: str) -> Artifact:
        ...


def diagram_sources(segments: Sequence[Segment]) -> list[str]:
    return [
        s.body for s in segments
        if s.is_code and s.language.lower() in DIAGRAM_LANGUAGES and s.body.strip()
    ]


async def render_diagrams(
    segments: Sequence[Segment],
    renderer: DiagramRenderer,
) -> list[Artifact]:
    """Render every diagram fence in ``segments``, in order."""
    artifacts: list[Artifact] = []
    for source in diagram_sources(segments):
        try:
            artifact = await renderer.render(source)
        except Exception as e:
            _log.warning("Diagram render failed", length=len(source), error=str(e))
            error_monitor.record("diagram", str(e))
            continue
        _log.info("Diagram rendered", file=artifact.filename)
        artifacts.append(artifact)
    return artifacts
