"""Process-local summary store for tests and local runs."""

from src.services.storage.base import BaseSummaryStore


class InMemorySummaryStore(BaseSummaryStore):
    """Dict-backed store. Contents are lost on restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._summaries: dict[str, str] = dict(initial or {})

    async def get_existing(self, call_id: str) -> str | None:
        return self._summaries.get(call_id) or None

    async def set_summary(self, call_id: str, text: str) -> None:
        self._summaries[call_id] = text
