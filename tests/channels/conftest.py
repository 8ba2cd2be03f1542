"""Shared fakes for delivery pipeline tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

import pytest

from courier.channels.delivery.artifacts import FileArtifact
from courier.channels.delivery.types import DeliveryConfig
from courier.channels.protocol import ChannelCapabilities


@dataclass
class RecordingTransport:
    """Transport fake that records every call in order."""

    destination_id: str = "channel-1"
    fail_on: set[int] = field(default_factory=set)
    calls: list[tuple[str, Any]] = field(default_factory=list)
    capabilities: ChannelCapabilities = field(default_factory=ChannelCapabilities)
    _sends: int = 0

    async def send_typing(self) -> None:
        self.calls.append(("typing", None))

    async def send(self, content: str, attachments: Sequence[Any] = ()) -> None:
        index = self._sends
        self._sends += 1
        if index in self.fail_on:
            raise RuntimeError(f"send {index} failed")
        self.calls.append(("send", (content, list(attachments))))

    @property
    def sent(self) -> list[tuple[str, list[Any]]]:
        return [payload for kind, payload in self.calls if kind == "send"]

    @property
    def sent_contents(self) -> list[str]:
        return [content for content, _ in self.sent]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def config() -> DeliveryConfig:
    return DeliveryConfig(max_length=2000, inter_message_delay_ms=0)


@pytest.fixture
def diagram(tmp_path: Path) -> FileArtifact:
    path = tmp_path / "diagram.png"
    path.write_bytes(b"\x89PNG")
    return FileArtifact(path=path, filename="diagram.png", description="Mermaid diagram")


@pytest.fixture
def make_transport():
    return RecordingTransport
