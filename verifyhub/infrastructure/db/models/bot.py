from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from verifyhub.infrastructure.db.base import Base, TimestampMixin


class BotCommand(TimestampMixin, Base):
    __tablename__ = "bot_commands"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    command_type: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    server_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    admin_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    verification_url: Mapped[str | None] = mapped_column(String(2048))
