"""Unit tests for the summarization pipeline (all collaborators faked)."""

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from src.core.config import Settings
from src.core.exceptions import (
    ConfigurationError,
    EmptyGenerationError,
    FetchFailedError,
    GenerationFailedError,
    NoModelsAvailableError,
    StoreReadError,
    StoreWriteError,
)
from src.core.models import DiscoverySource, ModelCandidate, RecordingReference, SummarySource
from src.services.llm import ModelCatalog
from src.services.llm.gemini import GeminiLLM
from src.services.media import MediaFetcher
from src.services.storage import BaseSummaryStore, InMemorySummaryStore
from src.services.summarization import SummarizationService
from src.services.summarization.prompts import REQUIRED_SECTIONS

MODEL = "gemini-1.5-flash"
REFERENCE = RecordingReference(
    location="https://cdn.example.com/calls/call-1.mp4",
    recording_id="rec-1",
    call_id="call-1",
)


@pytest.fixture
def fetcher(sample_media):
    mock = AsyncMock(spec=MediaFetcher)
    mock.fetch.return_value = sample_media
    return mock


@pytest.fixture
def catalog():
    mock = AsyncMock(spec=ModelCatalog)
    mock.list_candidates.return_value = [ModelCandidate(MODEL, DiscoverySource.discovered)]
    return mock


@pytest.fixture
def make_service(make_llm, fetcher, catalog, sectioned_summary):
    """Build a service; keyword overrides replace the default fakes."""

    def _make(**overrides) -> SummarizationService:
        params = {
            "llm": make_llm(generate={MODEL: [sectioned_summary]}),
            "catalog": catalog,
            "fetcher": fetcher,
            "store": InMemorySummaryStore(),
        }
        params.update(overrides)
        return SummarizationService(**params)

    return _make


# ---------------------------------------------------------------------------
# Happy path and idempotence
# ---------------------------------------------------------------------------


class TestGeneratedSummary:
    async def test_generates_sanitizes_and_persists(self, make_service):
        store = InMemorySummaryStore()
        result = await make_service(store=store).summarize(REFERENCE)

        assert result.source is SummarySource.generated
        assert result.model_used == MODEL
        assert result.recording_id == "rec-1"
        for section in REQUIRED_SECTIONS:
            assert section in result.summary
        assert "#" not in result.summary
        assert "*" not in result.summary
        assert "`" not in result.summary
        assert "release notes by Thursday" in result.summary
        assert await store.get_existing("call-1") == result.summary

    async def test_timestamp_is_iso8601(self, make_service):
        from datetime import datetime

        result = await make_service().summarize(REFERENCE)

        assert datetime.fromisoformat(result.timestamp).tzinfo is not None

    async def test_without_call_id_nothing_is_stored(self, make_service, caplog):
        store = AsyncMock(spec=BaseSummaryStore)
        reference = RecordingReference(location=REFERENCE.location)

        with caplog.at_level(logging.WARNING):
            result = await make_service(store=store).summarize(reference)

        assert result.source is SummarySource.generated
        store.get_existing.assert_not_awaited()
        store.set_summary.assert_not_awaited()
        assert "No callId provided" in caplog.text

    async def test_without_store_still_generates(self, make_service):
        result = await make_service(store=None).summarize(REFERENCE)

        assert result.source is SummarySource.generated


class TestExistingSummary:
    async def test_store_hit_skips_all_work(self, make_service, make_llm, fetcher, catalog):
        llm = make_llm()
        store = InMemorySummaryStore({"call-1": "Meeting Overview\nStored earlier."})

        result = await make_service(llm=llm, store=store).summarize(REFERENCE)

        assert result.source is SummarySource.existing
        assert result.summary == "Meeting Overview\nStored earlier."
        assert result.model_used is None
        assert llm.calls == []
        assert llm.validated == 0
        fetcher.fetch.assert_not_awaited()
        catalog.list_candidates.assert_not_awaited()

    async def test_second_call_reuses_first_result(self, make_service, make_llm, sectioned_summary):
        llm = make_llm(generate={MODEL: [sectioned_summary]})
        service = make_service(llm=llm, store=InMemorySummaryStore())

        first = await service.summarize(REFERENCE)
        second = await service.summarize(REFERENCE)

        assert second.source is SummarySource.existing
        assert second.summary == first.summary
        assert llm.generation_calls() == [MODEL]


# ---------------------------------------------------------------------------
# Store failures are non-fatal
# ---------------------------------------------------------------------------


class TestStoreFailures:
    async def test_read_failure_falls_through_to_generation(self, make_service):
        store = AsyncMock(spec=BaseSummaryStore)
        store.get_existing.side_effect = StoreReadError("call-1", "timeout")

        result = await make_service(store=store).summarize(REFERENCE)

        assert result.source is SummarySource.generated
        store.set_summary.assert_awaited_once_with("call-1", result.summary)

    async def test_write_failure_still_returns_summary(self, make_service, caplog):
        store = AsyncMock(spec=BaseSummaryStore)
        store.get_existing.return_value = None
        store.set_summary.side_effect = StoreWriteError("call-1", "forbidden")

        with caplog.at_level(logging.ERROR):
            result = await make_service(store=store).summarize(REFERENCE)

        assert result.summary
        assert "Failed to save summary" in caplog.text


# ---------------------------------------------------------------------------
# Failures that reach the caller
# ---------------------------------------------------------------------------


class TestFailures:
    async def test_missing_key_fails_before_fetch(self, make_service, fetcher):
        service = make_service(llm=GeminiLLM(api_key=""))

        with pytest.raises(ConfigurationError):
            await service.summarize(REFERENCE)

        fetcher.fetch.assert_not_awaited()

    async def test_fetch_failure_propagates(self, make_service, fetcher, catalog):
        fetcher.fetch.side_effect = FetchFailedError(REFERENCE.location, 403, "Forbidden")

        with pytest.raises(FetchFailedError, match="HTTP 403"):
            await make_service().summarize(REFERENCE)

        catalog.list_candidates.assert_not_awaited()

    async def test_empty_catalog_fails_without_generation(self, make_service, make_llm, catalog):
        catalog.list_candidates.return_value = []
        llm = make_llm()
        store = InMemorySummaryStore()

        with pytest.raises(NoModelsAvailableError, match="No Gemini models found"):
            await make_service(llm=llm, store=store).summarize(REFERENCE)

        assert llm.calls == []
        assert await store.get_existing("call-1") is None

    async def test_markdown_only_output_is_empty(self, make_service, make_llm):
        llm = make_llm(generate={MODEL: ["** ## **"]})
        store = InMemorySummaryStore()

        with pytest.raises(EmptyGenerationError):
            await make_service(llm=llm, store=store).summarize(REFERENCE)

        assert await store.get_existing("call-1") is None

    async def test_deadline_bounds_the_pipeline(self, make_service, fetcher):
        async def slow_fetch(location):
            await asyncio.sleep(5)

        fetcher.fetch.side_effect = slow_fetch

        with pytest.raises(GenerationFailedError, match="timed out"):
            await make_service(deadline=0.05).summarize(REFERENCE)


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


class TestFromSettings:
    def test_memory_backend(self):
        settings = Settings(gemini_api_key="k", summary_store="memory", _env_file=None)
        service = SummarizationService.from_settings(settings)

        assert isinstance(service._store, InMemorySummaryStore)
        assert isinstance(service._llm, GeminiLLM)
        assert service._deadline is None

    def test_backend_override_disables_store(self):
        settings = Settings(gemini_api_key="k", summary_store="memory", _env_file=None)
        service = SummarizationService.from_settings(settings, store_backend="none")

        assert service._store is None

    def test_deadline_from_settings(self):
        settings = Settings(
            gemini_api_key="k",
            summary_store="none",
            summarize_deadline_seconds=30,
            _env_file=None,
        )

        assert SummarizationService.from_settings(settings)._deadline == 30
