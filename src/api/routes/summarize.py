"""
Summarize REST endpoint.

``POST /summarize`` turns a call recording URL into a plain-text meeting
summary, reusing the summary already stored for the call when there is one.
"""

from functools import lru_cache

from fastapi import APIRouter, Depends

from src.core.models import (
    ErrorResponse,
    RecordingReference,
    SummarizeRequest,
    SummarizeResponse,
    SummarySource,
)
from src.services.summarization import SummarizationService

router = APIRouter(tags=["summaries"])


@lru_cache
def get_summarization_service() -> SummarizationService:
    """Return the process-wide service wired from settings."""
    return SummarizationService.from_settings()


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def summarize(
    body: SummarizeRequest,
    service: SummarizationService = Depends(get_summarization_service),
):
    """Summarize a recording; ``source`` is "existing" when the store had one."""
    result = await service.summarize(
        RecordingReference(
            location=body.recording_url,
            recording_id=body.recording_id,
            call_id=body.call_id,
        )
    )
    return SummarizeResponse(
        summary=result.summary,
        recording_id=result.recording_id,
        timestamp=result.timestamp,
        source=SummarySource.existing.value if result.source is SummarySource.existing else None,
    )
