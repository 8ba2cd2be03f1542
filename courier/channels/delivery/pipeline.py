"""Response delivery pipeline: raw AI text in, ordered platform messages out.

sanitize -> segment -> (split text | place code) -> sequence -> transport
"""

from __future__ import annotations

import asyncio
import re
import uuid
from pathlib import Path
from typing import Sequence

from courier.channels.delivery.artifacts import ArtifactStore
from courier.channels.delivery.code_policy import place_code_block
from courier.channels.delivery.diagrams import DiagramRenderer, render_diagrams
from courier.channels.delivery.segmenter import segment
from courier.channels.delivery.sequencer import deliver
from courier.channels.delivery.text_splitter import split_text
from courier.channels.delivery.types import (
    ArtifactFactory,
    DeliverableUnit,
    DeliveryConfig,
    Segment,
    UnitKind,
)
from courier.channels.protocol import Artifact, Transport
from courier.core.logging import get_logger, reset_delivery_id, set_delivery_id

_log = get_logger("channels.delivery.pipeline")

DIAGRAM_ONLY_TEXT = "Here's your diagram:"

# NUL and zero-width characters render as nothing but still count toward limits
_INVISIBLE_RE = re.compile(r"[\u0000\u200b-\u200d\ufeff]")


def sanitize(text: str) -> str:
    return _INVISIBLE_RE.sub("", text)


async def _units_for(
    seg: Segment,
    config: DeliveryConfig,
    create_artifact: ArtifactFactory | None,
) -> list[DeliverableUnit]:
    if seg.is_code:
        return await place_code_block(seg, config, create_artifact)
    return [
        DeliverableUnit(content=piece, kind=UnitKind.TEXT)
        for piece in split_text(seg.raw, config.max_length)
    ]


async def build_units(
    raw_text: str,
    config: DeliveryConfig,
    create_artifact: ArtifactFactory | None = None,
) -> list[DeliverableUnit]:
    """Turn a raw response into an ordered queue of deliverable units.

    Segments are processed concurrently (artifact writes overlap) and
    flattened back in original order.
    """
    segments = segment(sanitize(raw_text or ""))
    per_segment = await asyncio.gather(
        *(_units_for(s, config, create_artifact) for s in segments)
    )
    return [unit for units in per_segment for unit in units]


async def deliver_response(
    raw_text: str,
    side_artifacts: Sequence[Artifact],
    config: DeliveryConfig,
    transport: Transport,
    *,
    artifact_store: ArtifactStore | None = None,
) -> None:
    """Deliver one AI response to ``transport``.

    Args:
        raw_text: The response exactly as the model produced it.
        side_artifacts: Files (rendered diagrams) for the final message.
        config: Size limits, pacing and failure policy.
        transport: Destination binding.
        artifact_store: Where oversized code blocks become files. Without
            one, oversized blocks are split into fenced parts.

    Raises:
        Exception: Transport failures, unchanged.
    """
    token = set_delivery_id(uuid.uuid4().hex)
    try:
        create_artifact = artifact_store.create if artifact_store is not None else None
        units = await build_units(raw_text, config, create_artifact)

        if not units and side_artifacts:
            units = [DeliverableUnit(content=DIAGRAM_ONLY_TEXT)]

        _log.info(
            "Delivering response",
            destination=transport.destination_id,
            length=len(raw_text or ""),
            units=len(units),
            files=len(side_artifacts),
        )
        await deliver(units, side_artifacts, transport, config)
    finally:
        reset_delivery_id(token)


class DeliveryCoordinator:
    """Serializes deliveries per destination.

    Responses to the same destination are delivered one at a time, in the
    order they arrive, so their messages never interleave. Different
    destinations proceed concurrently.

    Oversized code blocks go to ``artifact_store``; with only ``artifact_dir``
    a store is created there using ``config.artifact_ttl_seconds``.
    """

    def __init__(
        self,
        config: DeliveryConfig | None = None,
        *,
        artifact_store: ArtifactStore | None = None,
        artifact_dir: Path | str | None = None,
        renderer: DiagramRenderer | None = None,
    ) -> None:
        self._config = config or DeliveryConfig()
        if artifact_store is None and artifact_dir is not None:
            artifact_store = ArtifactStore(
                artifact_dir, ttl_seconds=self._config.artifact_ttl_seconds
            )
        self._artifact_store = artifact_store
        self._renderer = renderer
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def config(self) -> DeliveryConfig:
        return self._config

    @property
    def artifact_store(self) -> ArtifactStore | None:
        return self._artifact_store

    def _lock_for(self, destination_id: str) -> asyncio.Lock:
        if destination_id not in self._locks:
            self._locks[destination_id] = asyncio.Lock()
        return self._locks[destination_id]

    async def deliver(
        self,
        transport: Transport,
        raw_text: str,
        side_artifacts: Sequence[Artifact] = (),
    ) -> None:
        async with self._lock_for(transport.destination_id):
            extras = list(side_artifacts)
            if self._renderer is not None:
                extras += await render_diagrams(segment(sanitize(raw_text or "")), self._renderer)
            await deliver_response(
                raw_text,
                extras,
                self._config,
                transport,
                artifact_store=self._artifact_store,
            )

    async def aclose(self) -> None:
        if self._artifact_store is not None:
            await self._artifact_store.aclose()
