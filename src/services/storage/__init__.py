"""
Storage module - Summary store backends and database helpers.

Factory function for creating a summary store based on configuration.
"""

import logging

from src.services.storage.base import BaseSummaryStore
from src.services.storage.database import (
    Base,
    close_db,
    get_engine,
    get_session,
    init_db,
    reset_engine,
)
from src.services.storage.memory import InMemorySummaryStore

__all__ = [
    "Base",
    "BaseSummaryStore",
    "InMemorySummaryStore",
    "close_db",
    "create_summary_store",
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
]

logger = logging.getLogger(__name__)


def create_summary_store(backend: str, **kwargs) -> BaseSummaryStore | None:
    """Factory function to create a summary store.

    Args:
        backend: "sqlite", "stream", "memory" or "none".
        **kwargs: Backend-specific configuration.

    Returns:
        A ``BaseSummaryStore``, or ``None`` when persistence is disabled
        or the Stream backend is missing credentials.

    Raises:
        ValueError: If backend is unknown.
    """
    if backend == "none":
        return None
    elif backend == "memory":
        return InMemorySummaryStore(**kwargs)
    elif backend == "sqlite":
        from src.services.storage.repository import SqlSummaryStore

        return SqlSummaryStore()
    elif backend == "stream":
        from src.core.exceptions import ConfigurationError
        from src.services.storage.stream import StreamCallStore

        try:
            return StreamCallStore(**kwargs)
        except ConfigurationError:
            logger.warning("Stream credentials missing; summaries will not be persisted")
            return None
    else:
        raise ValueError(f"Unknown summary store: {backend}")
