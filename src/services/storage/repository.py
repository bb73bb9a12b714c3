"""
Call-summary repository and the SQL-backed summary store.

``SummaryRepository`` receives an ``AsyncSession`` and provides the
data-access methods. It calls ``flush()`` rather than ``commit()`` so
that transaction boundaries are controlled by the caller (typically
:func:`get_session`). ``SqlSummaryStore`` wraps it behind the
``BaseSummaryStore`` interface.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import StoreReadError, StoreWriteError
from src.services.storage.base import BaseSummaryStore
from src.services.storage.database import get_session
from src.services.storage.models_db import CallSummary

logger = logging.getLogger(__name__)


class SummaryRepository:
    """Data-access layer for the ``call_summaries`` table.

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_summary(self, call_id: str) -> CallSummary | None:
        """Return the summary row for ``call_id`` or ``None``."""
        result = await self._session.execute(
            select(CallSummary)
            .where(CallSummary.call_id == call_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert_summary(self, call_id: str, summary_text: str) -> None:
        """Create or overwrite the summary for ``call_id``.

        A single ``INSERT .. ON CONFLICT DO UPDATE`` statement, so concurrent
        writers for the same call never collide on the primary key; the
        last statement to run wins.
        """
        now = datetime.now(UTC)
        stmt = sqlite_insert(CallSummary).values(
            call_id=call_id,
            summary_text=summary_text,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[CallSummary.call_id],
            set_={"summary_text": stmt.excluded.summary_text, "updated_at": now},
        )
        await self._session.execute(stmt)
        await self._session.flush()


class SqlSummaryStore(BaseSummaryStore):
    """Summary store on top of the async SQLAlchemy database."""

    async def get_existing(self, call_id: str) -> str | None:
        try:
            async with get_session() as session:
                row = await SummaryRepository(session).get_summary(call_id)
        except Exception as exc:
            raise StoreReadError(call_id, str(exc)) from exc
        if row is None or not row.summary_text:
            return None
        return row.summary_text

    async def set_summary(self, call_id: str, text: str) -> None:
        try:
            async with get_session() as session:
                await SummaryRepository(session).upsert_summary(call_id, text)
        except Exception as exc:
            raise StoreWriteError(call_id, str(exc)) from exc
        logger.debug("Stored summary for call %s", call_id)
