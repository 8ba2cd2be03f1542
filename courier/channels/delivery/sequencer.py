"""Delivery sequencer: sends an ordered unit queue through a transport.

Units go out strictly one after another. Every unit after the first waits
for the pacing interval, every unit is preceded by a typing signal, and side
artifacts (rendered diagrams) ride on the last message only.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

from courier.channels.delivery.types import DeliverableUnit, DeliveryConfig
from courier.channels.protocol import Artifact, Transport
from courier.core.logging import error_monitor, get_logger

_log = get_logger("channels.delivery.sequencer")


async def _send_unit(
    transport: Transport,
    unit: DeliverableUnit,
    attachments: list[Artifact],
    index: int,
    total: int,
) -> None:
    await transport.send(unit.content, attachments)
    _log.debug(
        "Unit sent",
        unit=f"{index + 1}/{total}",
        kind=unit.kind.value,
        length=len(unit.content),
        files=len(attachments),
    )


def _report_failure(
    transport: Transport,
    unit: DeliverableUnit,
    step: str,
    index: int,
    total: int,
    error: Exception,
) -> None:
    error_monitor.record("transport", str(error))
    _log.warning(
        "Unit send failed" if step == "send" else "Typing signal failed",
        unit=f"{index + 1}/{total}",
        kind=unit.kind.value,
        destination=transport.destination_id,
        error=str(error),
    )


async def deliver(
    units: Sequence[DeliverableUnit],
    side_artifacts: Sequence[Artifact],
    transport: Transport,
    config: DeliveryConfig | None = None,
) -> None:
    """Send ``units`` in order through ``transport``.

    Args:
        units: Deliverable units in queue order.
        side_artifacts: Extra files attached to the final message.
        transport: Destination to send to.
        config: Pacing and failure policy; defaults apply when omitted.

    Raises:
        Exception: Whatever the transport raised. With ``stop_on_failure``
            the first failure aborts the queue; otherwise every unit is still
            sent, even after its typing signal failed, and the first failure
            is re-raised at the end.
    """
    config = config or DeliveryConfig()
    total = len(units)
    if total == 0:
        return

    first_error: BaseException | None = None
    failed = 0

    for index, unit in enumerate(units):
        is_last = index == total - 1
        attachments = unit.attachments
        if is_last:
            attachments = attachments + list(side_artifacts)

        if index > 0 and config.inter_message_delay > 0:
            await asyncio.sleep(config.inter_message_delay)

        # A failed typing signal never costs the unit its send
        try:
            await transport.send_typing()
        except Exception as e:
            failed += 1
            _report_failure(transport, unit, "typing", index, total, e)
            if config.stop_on_failure:
                raise
            if first_error is None:
                first_error = e

        try:
            await _send_unit(transport, unit, attachments, index, total)
        except Exception as e:
            failed += 1
            _report_failure(transport, unit, "send", index, total, e)
            if config.stop_on_failure:
                raise
            if first_error is None:
                first_error = e

    if first_error is not None:
        _log.error(
            "Delivery finished with failures",
            destination=transport.destination_id,
            failures=failed,
            units=total,
        )
        raise first_error
