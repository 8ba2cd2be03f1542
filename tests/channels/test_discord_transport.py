"""Tests for the Discord transport binding."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from courier.channels.delivery.artifacts import FileArtifact
from courier.channels.discord import DiscordTransport, to_discord_file
from courier.channels.discord.transport import DISCORD_MAX_ATTACHMENTS
from courier.channels.protocol import Platform, Transport


@pytest.fixture
def channel():
    ch = MagicMock()
    ch.id = 123456789
    ch.send = AsyncMock()
    ch.typing = AsyncMock()
    return ch


@pytest.fixture
def make_artifact(tmp_path: Path):
    def _make(name: str = "code_1.py", description: str = "Code snippet (python)") -> FileArtifact:
        path = tmp_path / name
        path.write_text("print('hi')", encoding="utf-8")
        return FileArtifact(path=path, filename=name, description=description)
    return _make


class TestDiscordTransport:
    def test_is_transport(self, channel) -> None:
        assert isinstance(DiscordTransport(channel), Transport)

    def test_identity(self, channel) -> None:
        transport = DiscordTransport(channel)
        assert transport.destination_id == "123456789"
        assert transport.platform is Platform.DISCORD
        assert transport.capabilities.max_message_length == 2000
        assert transport.capabilities.max_attachments == DISCORD_MAX_ATTACHMENTS

    def test_for_message(self, channel) -> None:
        message = MagicMock()
        message.channel = channel
        assert DiscordTransport.for_message(message).destination_id == "123456789"

    async def test_send_typing(self, channel) -> None:
        await DiscordTransport(channel).send_typing()
        channel.typing.assert_awaited_once()

    async def test_send_text_only(self, channel) -> None:
        await DiscordTransport(channel).send("hello @everyone")

        channel.send.assert_awaited_once()
        kwargs = channel.send.await_args.kwargs
        assert kwargs["content"] == "hello @everyone"
        assert "files" not in kwargs
        mentions = kwargs["allowed_mentions"]
        assert isinstance(mentions, discord.AllowedMentions)
        assert mentions.everyone is False
        assert mentions.users is False
        assert mentions.roles is False

    async def test_send_with_attachments(self, channel, make_artifact) -> None:
        artifact = make_artifact()
        await DiscordTransport(channel).send("see file", [artifact])

        files = channel.send.await_args.kwargs["files"]
        assert len(files) == 1
        assert isinstance(files[0], discord.File)
        assert files[0].filename == "code_1.py"
        assert files[0].description == "Code snippet (python)"

    async def test_attachments_capped(self, channel, make_artifact) -> None:
        artifacts = [make_artifact(f"code_{i}.txt") for i in range(12)]
        await DiscordTransport(channel).send("many", artifacts)

        files = channel.send.await_args.kwargs["files"]
        assert [f.filename for f in files] == [f"code_{i}.txt" for i in range(10)]

    async def test_send_error_propagates(self, channel) -> None:
        channel.send.side_effect = RuntimeError("rate limited")
        with pytest.raises(RuntimeError):
            await DiscordTransport(channel).send("hello")


class TestToDiscordFile:
    def test_empty_description_omitted(self, make_artifact) -> None:
        file = to_discord_file(make_artifact("diagram.png", description=""))
        assert file.filename == "diagram.png"
        assert file.description is None
