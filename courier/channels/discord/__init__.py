from .transport import DiscordTransport, to_discord_file

__all__ = ["DiscordTransport", "to_discord_file"]
