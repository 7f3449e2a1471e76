"""ORM model imports."""

from verifyhub.infrastructure.db.models.admin import AdminSession
from verifyhub.infrastructure.db.models.bot import BotCommand
from verifyhub.infrastructure.db.models.verification import VerifiedUser

__all__ = [
    "AdminSession",
    "BotCommand",
    "VerifiedUser",
]
