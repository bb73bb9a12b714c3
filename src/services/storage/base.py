"""
Abstract base class for summary stores.

A summary store is keyed by call ID and holds at most one active summary
per call. Reads and writes are not transactional with respect to each
other: two requests for the same call may both miss, both generate and
both write, in which case the last write wins.
"""

from abc import ABC, abstractmethod


class BaseSummaryStore(ABC):
    """Interface that every summary store backend must implement."""

    @abstractmethod
    async def get_existing(self, call_id: str) -> str | None:
        """Return the stored summary for ``call_id``, or ``None``.

        Raises:
            StoreReadError: If the backend cannot be read.
        """

    @abstractmethod
    async def set_summary(self, call_id: str, text: str) -> None:
        """Attach ``text`` as the summary of ``call_id`` (overwrites).

        Raises:
            StoreWriteError: If the backend cannot be written.
        """
