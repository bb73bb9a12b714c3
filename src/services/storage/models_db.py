"""
SQLAlchemy ORM models for the Meeting Recap schema.

Tables: ``call_summaries``.
"""

from datetime import UTC, datetime

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.services.storage.database import Base


class CallSummary(Base):
    """The active summary attached to a call."""

    __tablename__ = "call_summaries"

    call_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    summary_text: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<CallSummary call_id={self.call_id!r}>"
