"""
Model selection / retry state machine.

Turns an ordered list of model candidates, a media payload and a prompt
into raw model output:

1. **Probe** - each candidate gets a tiny test request in order; the first
   one that answers is adopted. A credential failure stops everything.
2. **Generate** - the real request goes to the adopted model. "Model not
   found" moves to the next candidate with a fresh retry budget; "rate
   limited" spends budget and waits ``(budget - remaining) * unit`` before
   retrying the same model; anything else fails immediately.

The policy lives in two pure functions, ``next_probe_step`` and
``next_generation_step``, mapping ``(cursor, outcome)`` to a
``Transition``. ``SummaryGenerator`` only performs the calls and follows
the transitions, so the decision table can be tested without any network.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from enum import StrEnum

from src.core.exceptions import (
    EmptyGenerationError,
    GenerationFailedError,
    InvalidCredentialsError,
    NoModelsAvailableError,
    RateLimitedError,
)
from src.core.models import (
    AttemptOutcome,
    GenerationAttempt,
    GenerationResult,
    MediaPayload,
    ModelCandidate,
)
from src.services.llm.base import BaseLLM
from src.services.summarization.errors import classify_error, describe_failure

logger = logging.getLogger(__name__)


class GeneratorState(StrEnum):
    """States of the selection / retry machine."""

    selecting_model = "selecting_model"
    probing = "probing"
    generating = "generating"
    succeeded = "succeeded"
    exhausted_models = "exhausted_models"
    fatal = "fatal"


TERMINAL_STATES = frozenset(
    {GeneratorState.succeeded, GeneratorState.exhausted_models, GeneratorState.fatal}
)


@dataclass(frozen=True)
class RetryPolicy:
    """Per-model retry budget and linear backoff unit (seconds)."""

    budget: int = 3
    backoff_unit: float = 2.0


@dataclass(frozen=True)
class Cursor:
    """Position in the candidate list plus the budget left for that model."""

    index: int
    remaining: int
    count: int

    @property
    def has_next(self) -> bool:
        return self.index + 1 < self.count


@dataclass(frozen=True)
class Transition:
    """Next state, where to point, how long to wait, and why we stopped."""

    state: GeneratorState
    cursor: Cursor
    delay: float = 0.0
    failure: AttemptOutcome | None = None


def start(count: int, policy: RetryPolicy) -> Transition:
    """Select the first candidate, or give up if there are none."""
    cursor = Cursor(index=0, remaining=policy.budget, count=count)
    if count == 0:
        return Transition(GeneratorState.exhausted_models, cursor)
    return Transition(GeneratorState.probing, cursor)


def next_probe_step(cursor: Cursor, outcome: AttemptOutcome, policy: RetryPolicy) -> Transition:
    """Decide what follows a probe call against ``cursor.index``."""
    if outcome is AttemptOutcome.success:
        return Transition(GeneratorState.generating, replace(cursor, remaining=policy.budget))
    if outcome is AttemptOutcome.invalid_credentials:
        return Transition(GeneratorState.fatal, cursor, failure=outcome)
    if cursor.has_next:
        return Transition(
            GeneratorState.probing,
            replace(cursor, index=cursor.index + 1, remaining=policy.budget),
        )
    return Transition(GeneratorState.exhausted_models, cursor, failure=outcome)


def next_generation_step(
    cursor: Cursor, outcome: AttemptOutcome, policy: RetryPolicy
) -> Transition:
    """Decide what follows a generation call against ``cursor.index``."""
    if outcome is AttemptOutcome.success:
        return Transition(GeneratorState.succeeded, cursor)

    if outcome is AttemptOutcome.model_unavailable:
        if cursor.has_next:
            return Transition(
                GeneratorState.generating,
                replace(cursor, index=cursor.index + 1, remaining=policy.budget),
            )
        return Transition(GeneratorState.exhausted_models, cursor, failure=outcome)

    if outcome is AttemptOutcome.rate_limited:
        remaining = cursor.remaining - 1
        spent = replace(cursor, remaining=remaining)
        if remaining > 0:
            delay = (policy.budget - remaining) * policy.backoff_unit
            return Transition(GeneratorState.generating, spent, delay=delay)
        return Transition(GeneratorState.fatal, spent, failure=outcome)

    return Transition(GeneratorState.fatal, cursor, failure=outcome)


class SummaryGenerator:
    """Drives the probe and generation phases against a provider.

    Args:
        llm: Provider transport.
        policy: Retry budget and backoff unit.
        probe_prompt: Minimal text used to test a model.
        sleep: Awaitable sleep (tests pass a recorder instead of
            ``asyncio.sleep``).
    """

    def __init__(
        self,
        llm: BaseLLM,
        policy: RetryPolicy | None = None,
        probe_prompt: str = "Hello",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._llm = llm
        self._policy = policy or RetryPolicy()
        self._probe_prompt = probe_prompt
        self._sleep = sleep

    async def _attempt(
        self,
        model: str,
        prompt: str,
        media: MediaPayload | None,
        attempts: list[GenerationAttempt],
        probe: bool,
    ) -> tuple[AttemptOutcome, str]:
        """Make one call and record it. Returns ``(outcome, text_or_error)``."""
        try:
            text = await self._llm.generate(model, prompt, media)
        except Exception as exc:
            outcome = classify_error(exc)
            attempts.append(GenerationAttempt(model, outcome, str(exc), probe=probe))
            return outcome, str(exc)
        attempts.append(GenerationAttempt(model, AttemptOutcome.success, probe=probe))
        return AttemptOutcome.success, text

    @staticmethod
    def _tried(attempts: list[GenerationAttempt]) -> list[str]:
        return list(dict.fromkeys(a.model_tried for a in attempts))

    def _failure(
        self,
        transition: Transition,
        attempts: list[GenerationAttempt],
        candidates: list[ModelCandidate],
        last_error: str,
    ) -> Exception:
        """Map a terminal transition to the exception the caller sees."""
        model = candidates[transition.cursor.index].name if candidates else ""
        if transition.state is GeneratorState.exhausted_models:
            return NoModelsAvailableError(self._tried(attempts), last_error)
        if transition.failure is AttemptOutcome.invalid_credentials:
            return InvalidCredentialsError(last_error)
        if transition.failure is AttemptOutcome.rate_limited:
            return RateLimitedError(model)
        return GenerationFailedError(describe_failure(last_error), model=model)

    async def generate(
        self,
        candidates: list[ModelCandidate],
        media: MediaPayload,
        prompt: str,
    ) -> GenerationResult:
        """Probe for a working model, then generate with retry / fallback.

        Raises:
            InvalidCredentialsError: The provider rejected the key.
            NoModelsAvailableError: No candidates, or all of them failed.
            RateLimitedError: Retry budget ran out while backing off.
            EmptyGenerationError: The model answered with no text.
            GenerationFailedError: Any other provider failure.
        """
        policy = self._policy
        attempts: list[GenerationAttempt] = []
        last_error = ""

        transition = start(len(candidates), policy)

        while transition.state is GeneratorState.probing:
            model = candidates[transition.cursor.index].name
            logger.info("Testing model: %s", model)
            outcome, detail = await self._attempt(
                model, self._probe_prompt, None, attempts, probe=True
            )
            if outcome is AttemptOutcome.success:
                logger.info("Model %s is available", model)
            else:
                last_error = detail
                logger.info("Model %s failed probe (%s): %s", model, outcome, detail)
            transition = next_probe_step(transition.cursor, outcome, policy)

        while transition.state is GeneratorState.generating:
            model = candidates[transition.cursor.index].name
            logger.info(
                "Sending %s (%.2fMB) to %s", media.content_type, media.size_mb, model
            )
            outcome, detail = await self._attempt(model, prompt, media, attempts, probe=False)
            if outcome is AttemptOutcome.success:
                if not detail:
                    raise EmptyGenerationError(model)
                return GenerationResult(text=detail, model=model, attempts=attempts)

            last_error = detail
            transition = next_generation_step(transition.cursor, outcome, policy)
            if transition.state in TERMINAL_STATES:
                break
            if outcome is AttemptOutcome.model_unavailable:
                logger.info(
                    "Model %s not available, trying %s",
                    model,
                    candidates[transition.cursor.index].name,
                )
            elif transition.delay:
                logger.warning(
                    "Rate limit hit on %s. Retrying in %.1fs (%d attempts left)",
                    model,
                    transition.delay,
                    transition.cursor.remaining,
                )
                await self._sleep(transition.delay)

        raise self._failure(transition, attempts, candidates, last_error)
