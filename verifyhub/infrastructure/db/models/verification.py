from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from verifyhub.infrastructure.db.base import Base, TimestampMixin


class VerifiedUser(TimestampMixin, Base):
    __tablename__ = "verified_users"

    id: Mapped[str] = mapped_column(String(96), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    discriminator: Mapped[str] = mapped_column(
        String(8),
        default="0",
        server_default="0",
        nullable=False,
    )
    avatar_url: Mapped[str | None] = mapped_column(String(512))
    email: Mapped[str | None] = mapped_column(String(320))
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(Text)
    token_type: Mapped[str] = mapped_column(
        String(32),
        default="Bearer",
        server_default="Bearer",
        nullable=False,
    )
    scope: Mapped[str | None] = mapped_column(String(255))
    server_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    verified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        index=True,
        nullable=False,
    )
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
