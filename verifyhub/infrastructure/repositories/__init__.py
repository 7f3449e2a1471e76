"""Record store repositories."""

from verifyhub.infrastructure.repositories.admin_session_repository import (
    AdminSessionRepository,
)
from verifyhub.infrastructure.repositories.bot_command_repository import (
    BotCommandRepository,
)
from verifyhub.infrastructure.repositories.verification_repository import (
    VerifiedUserRepository,
)

__all__ = [
    "AdminSessionRepository",
    "BotCommandRepository",
    "VerifiedUserRepository",
]
