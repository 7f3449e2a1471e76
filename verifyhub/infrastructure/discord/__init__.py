from verifyhub.infrastructure.discord.oauth_client import (
    DiscordOAuthClient,
    DiscordOAuthError,
)

__all__ = ["DiscordOAuthClient", "DiscordOAuthError"]
