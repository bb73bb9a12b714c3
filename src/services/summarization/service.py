"""
Summarization pipeline orchestration.

``SummarizationService.summarize`` runs: store lookup -> media fetch ->
model discovery -> probe / generate -> sanitize -> store write.

The store is a best-effort cache, not a lock: a read failure just means
we generate, a write failure just means we do not persist, and two
concurrent requests for the same call may both generate (last write wins).
"""

import asyncio
import logging
from datetime import UTC, datetime

from src.core.config import Settings, get_settings
from src.core.exceptions import (
    EmptyGenerationError,
    GenerationFailedError,
    NoModelsAvailableError,
)
from src.core.models import (
    GenerationResult,
    RecordingReference,
    SummaryResult,
    SummarySource,
)
from src.services.llm import BaseLLM, ModelCatalog, create_llm
from src.services.media import MediaFetcher
from src.services.storage import BaseSummaryStore, create_summary_store
from src.services.summarization.generator import RetryPolicy, SummaryGenerator
from src.services.summarization.prompts import MEETING_SUMMARY_PROMPT
from src.services.summarization.sanitizer import sanitize_summary

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class SummarizationService:
    """Produces (or reuses) the plain-text summary of a call recording.

    Args:
        llm: Provider transport used for probing and generation.
        catalog: Source of ordered model candidates.
        fetcher: Recording downloader.
        store: Optional call-keyed summary store; ``None`` disables both the
            lookup and the write.
        generator: Optional pre-built generator (defaults to one wrapping
            ``llm`` with the default retry policy).
        prompt: Instruction text sent with the recording.
        deadline: Seconds allowed for fetch + generation; ``None`` or 0
            means no deadline.
    """

    def __init__(
        self,
        llm: BaseLLM,
        catalog: ModelCatalog,
        fetcher: MediaFetcher,
        store: BaseSummaryStore | None = None,
        generator: SummaryGenerator | None = None,
        prompt: str = MEETING_SUMMARY_PROMPT,
        deadline: float | None = None,
    ) -> None:
        self._llm = llm
        self._catalog = catalog
        self._fetcher = fetcher
        self._store = store
        self._generator = generator or SummaryGenerator(llm)
        self._prompt = prompt
        self._deadline = deadline or None

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        store_backend: str | None = None,
    ) -> "SummarizationService":
        """Wire the production collaborators from configuration.

        Args:
            settings: Configuration (defaults to ``get_settings()``).
            store_backend: Overrides ``settings.summary_store``.
        """
        settings = settings or get_settings()
        llm = create_llm("gemini", api_key=settings.gemini_api_key)
        store = create_summary_store(store_backend or settings.summary_store)
        generator = SummaryGenerator(
            llm,
            policy=RetryPolicy(
                budget=settings.generation_retry_budget,
                backoff_unit=settings.rate_limit_backoff_seconds,
            ),
            probe_prompt=settings.probe_prompt,
        )
        return cls(
            llm=llm,
            catalog=ModelCatalog(
                api_key=settings.gemini_api_key,
                base_url=settings.gemini_api_base_url,
                fallback_models=settings.gemini_fallback_models,
                marker=settings.gemini_model_marker,
                timeout=settings.http_timeout_seconds,
            ),
            fetcher=MediaFetcher(
                soft_limit_mb=settings.media_soft_limit_mb,
                hard_limit_mb=settings.media_hard_limit_mb,
                timeout=settings.http_timeout_seconds,
            ),
            store=store,
            generator=generator,
            deadline=settings.summarize_deadline_seconds,
        )

    async def _lookup_existing(self, call_id: str | None) -> str | None:
        if not call_id:
            logger.warning("No callId provided, summary will not be persisted")
            return None
        if self._store is None:
            logger.warning(
                "No summary store configured, summary for %s will not be persisted", call_id
            )
            return None
        try:
            return await self._store.get_existing(call_id)
        except Exception:
            logger.exception("Error fetching existing summary for call %s", call_id)
            return None

    async def _persist(self, call_id: str | None, summary: str) -> None:
        if not call_id or self._store is None:
            return
        try:
            await self._store.set_summary(call_id, summary)
            logger.info("Summary saved to call: %s", call_id)
        except Exception:
            logger.exception("Failed to save summary for call %s", call_id)

    async def _produce(self, location: str) -> GenerationResult:
        media = await self._fetcher.fetch(location)

        candidates = await self._catalog.list_candidates()
        if not candidates:
            raise NoModelsAvailableError()
        logger.info("Trying models: %s", ", ".join(c.name for c in candidates))

        return await self._generator.generate(candidates, media, self._prompt)

    async def summarize(self, reference: RecordingReference) -> SummaryResult:
        """Return the call's summary, generating it only when none is stored.

        Raises:
            ConfigurationError: The provider key is missing.
            FetchFailedError: The recording could not be downloaded.
            NoModelsAvailableError, InvalidCredentialsError, RateLimitedError,
            EmptyGenerationError, GenerationFailedError: Generation failed.
        """
        existing = await self._lookup_existing(reference.call_id)
        if existing:
            logger.info("Returning existing summary for call: %s", reference.call_id)
            return SummaryResult(
                summary=existing,
                source=SummarySource.existing,
                timestamp=_now_iso(),
                recording_id=reference.recording_id,
            )

        self._llm.validate()
        logger.info("Starting summarization for recording: %s", reference.location[:100])

        if self._deadline:
            try:
                result = await asyncio.wait_for(
                    self._produce(reference.location), timeout=self._deadline
                )
            except TimeoutError as exc:
                raise GenerationFailedError(
                    f"Summarization timed out after {self._deadline:.0f}s"
                ) from exc
        else:
            result = await self._produce(reference.location)

        summary = sanitize_summary(result.text)
        if not summary:
            raise EmptyGenerationError(result.model)

        await self._persist(reference.call_id, summary)
        logger.info("Summary generated successfully with %s", result.model)

        return SummaryResult(
            summary=summary,
            source=SummarySource.generated,
            timestamp=_now_iso(),
            recording_id=reference.recording_id,
            model_used=result.model,
        )
