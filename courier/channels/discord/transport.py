"""Discord transport binding for the delivery pipeline.

Wraps any ``discord.abc.Messageable`` (text channel, DM, thread) as a
``Transport``. Mentions in bot output are never pinged.
"""

from __future__ import annotations

from typing import Sequence

import discord

from courier.channels.protocol import Artifact, ChannelCapabilities, Platform
from courier.core.logging import get_logger

_log = get_logger("channels.discord")

DISCORD_MAX_LENGTH = 2000
DISCORD_MAX_ATTACHMENTS = 10


def to_discord_file(artifact: Artifact) -> discord.File:
    return discord.File(
        str(artifact.path),
        filename=artifact.filename,
        description=artifact.description or None,
    )


class DiscordTransport:
    """Sends pipeline output to one Discord channel."""

    def __init__(self, channel: discord.abc.Messageable) -> None:
        self._channel = channel

    @classmethod
    def for_message(cls, message: discord.Message) -> "DiscordTransport":
        """Transport that answers in the channel ``message`` arrived in."""
        return cls(message.channel)

    @property
    def platform(self) -> Platform:
        return Platform.DISCORD

    @property
    def destination_id(self) -> str:
        return str(getattr(self._channel, "id", id(self._channel)))

    @property
    def capabilities(self) -> ChannelCapabilities:
        return ChannelCapabilities(
            max_message_length=DISCORD_MAX_LENGTH,
            typing_indicator=True,
            attachments=True,
            max_attachments=DISCORD_MAX_ATTACHMENTS,
        )

    async def send_typing(self) -> None:
        await self._channel.typing()

    async def send(self, content: str, attachments: Sequence[Artifact] = ()) -> None:
        if len(content) > DISCORD_MAX_LENGTH:
            _log.warning("DISCORD content over limit", length=len(content))

        kwargs: dict = {
            "content": content,
            "allowed_mentions": discord.AllowedMentions.none(),
        }
        if attachments:
            if len(attachments) > DISCORD_MAX_ATTACHMENTS:
                _log.warning(
                    "DISCORD attachments truncated",
                    files=len(attachments),
                    max=DISCORD_MAX_ATTACHMENTS,
                )
            kwargs["files"] = [
                to_discord_file(a) for a in attachments[:DISCORD_MAX_ATTACHMENTS]
            ]

        await self._channel.send(**kwargs)
