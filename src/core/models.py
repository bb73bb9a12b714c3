"""
Request / response models and internal pipeline records.

API models are Pydantic v2 with camelCase aliases matching the JSON the
meeting UI sends. Internal records passed between services are frozen
dataclasses or ``StrEnum`` values.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Summarize API
# ---------------------------------------------------------------------------


class SummarizeRequest(BaseModel):
    """POST /summarize request body."""

    model_config = ConfigDict(populate_by_name=True)

    recording_url: str = Field(alias="recordingUrl", min_length=1)
    recording_id: str | None = Field(default=None, alias="recordingId")
    call_id: str | None = Field(default=None, alias="callId")


class SummarizeResponse(BaseModel):
    """POST /summarize response body. ``source`` is only set for store hits."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    recording_id: str | None = Field(default=None, alias="recordingId")
    timestamp: str
    source: str | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    error: str
    code: str
    details: str | None = None


# ---------------------------------------------------------------------------
# Pipeline records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecordingReference:
    """Immutable pipeline input. ``call_id`` is the idempotence key."""

    location: str
    recording_id: str | None = None
    call_id: str | None = None


@dataclass(frozen=True)
class MediaPayload:
    """Downloaded recording bytes, owned by a single request."""

    data: bytes = field(repr=False)
    content_type: str
    size_bytes: int

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)


class DiscoverySource(StrEnum):
    """Where a model candidate came from."""

    discovered = "discovered"
    static_fallback = "static_fallback"


@dataclass(frozen=True)
class ModelCandidate:
    """A generative model identifier in catalog preference order."""

    name: str
    discovery_source: DiscoverySource


class AttemptOutcome(StrEnum):
    """Classified result of a single provider call."""

    success = "success"
    model_unavailable = "model_unavailable"
    rate_limited = "rate_limited"
    invalid_credentials = "invalid_credentials"
    other_failure = "other_failure"


@dataclass(frozen=True)
class GenerationAttempt:
    """Diagnostic record of one probe or generation call (never persisted)."""

    model_tried: str
    outcome: AttemptOutcome
    error_detail: str = ""
    probe: bool = False


@dataclass
class GenerationResult:
    """Raw model output plus the attempts it took to get there."""

    text: str
    model: str
    attempts: list[GenerationAttempt] = field(default_factory=list)


class SummarySource(StrEnum):
    """Whether a summary came from the store or a fresh generation."""

    existing = "existing"
    generated = "generated"


@dataclass(frozen=True)
class SummaryResult:
    """What ``SummarizationService.summarize`` returns."""

    summary: str
    source: SummarySource
    timestamp: str
    recording_id: str | None = None
    model_used: str | None = None
