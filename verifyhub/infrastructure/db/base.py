from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from verifyhub.core.clock import utc_now


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """Adds created_at. Rows in this schema are written once and never updated."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )
