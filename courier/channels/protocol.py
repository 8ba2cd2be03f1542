"""Transport protocol: the outbound surface the delivery pipeline drives.

Each platform binding (Discord today) implements ``Transport`` for one
destination. The pipeline only ever signals typing and sends a message with
optional file attachments; everything else about the platform stays behind
the binding.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable


class Platform(str, Enum):
    """Supported messaging platforms."""

    DISCORD = "discord"


@dataclass(frozen=True)
class ChannelCapabilities:
    """Declares what a transport supports."""

    max_message_length: int = 2000
    typing_indicator: bool = True
    attachments: bool = True
    max_attachments: int = 10


@runtime_checkable
class Artifact(Protocol):
    """A file that can ride along with a sent message."""

    @property
    def filename(self) -> str: ...

    @property
    def path(self) -> Path: ...

    @property
    def description(self) -> str: ...


@runtime_checkable
class Transport(Protocol):
    """One destination (channel, DM, thread) on a chat platform.

    Both calls are request/response and may raise; the pipeline never
    catches transport errors on the caller's behalf.
    """

    @property
    def destination_id(self) -> str: ...

    @property
    def capabilities(self) -> ChannelCapabilities: ...

    async def send_typing(self) -> None:
        """Show the "composing" indicator."""
        ...

    async def send(self, content: str, attachments: Sequence[Artifact] = ()) -> None:
        """Send one message with optional file attachments."""
        ...
