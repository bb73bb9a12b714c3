"""Shared pytest fixtures for the Meeting Recap test suite.

Provides a scripted LLM provider, sample media, a well-formed sectioned
summary and an in-memory SQLite engine used across unit and integration
tests.
"""

from collections.abc import Callable

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from src.core.models import MediaPayload
from src.services.llm.base import BaseLLM, LLMProviderError

# ---------------------------------------------------------------------------
# LLM Fixtures
# ---------------------------------------------------------------------------


class ScriptedLLM(BaseLLM):
    """LLM double whose answers are scripted per model.

    ``probe`` and ``generate`` map a model name to a list of outcomes,
    consumed in order (the last one repeats). An outcome is either the
    text to return or an exception to raise. Models missing from
    ``probe`` answer the probe with "Hi".
    """

    def __init__(
        self,
        generate: dict[str, list] | None = None,
        probe: dict[str, list] | None = None,
    ) -> None:
        self._generate = {k: list(v) for k, v in (generate or {}).items()}
        self._probe = {k: list(v) for k, v in (probe or {}).items()}
        self.calls: list[tuple[str, bool]] = []
        self.validated = 0

    def validate(self) -> None:
        self.validated += 1

    @staticmethod
    def _next(script: list):
        return script.pop(0) if len(script) > 1 else script[0]

    async def generate(self, model, prompt, media=None):
        is_probe = media is None
        self.calls.append((model, is_probe))
        table = self._probe if is_probe else self._generate
        if model not in table:
            if is_probe:
                return "Hi"
            raise LLMProviderError(f"unscripted model {model}")
        outcome = self._next(table[model])
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def generation_calls(self, model: str | None = None) -> list[str]:
        return [m for m, probe in self.calls if not probe and (model is None or m == model)]

    def probe_calls(self) -> list[str]:
        return [m for m, probe in self.calls if probe]


@pytest.fixture
def make_llm() -> Callable[..., ScriptedLLM]:
    """Factory for ``ScriptedLLM`` instances."""
    return ScriptedLLM


@pytest.fixture
def sectioned_summary() -> str:
    """Model output covering the six required sections, with stray markdown."""
    return (
        "## Meeting Overview\n"
        "Weekly sync of the **platform** team.\n\n"
        "Key Topics Discussed\n"
        "Release schedule and the `deploy` pipeline.\n\n"
        "Decisions Made\n"
        "Ship version 2.3 on Friday.\n\n"
        "Action Items\n"
        "Dana prepares the [release notes](https://wiki.example.com/notes) by Thursday.\n\n"
        "Important Highlights\n"
        "Staging is stable.\n\n"
        "Next Steps\n"
        "Not mentioned\n"
    )


# ---------------------------------------------------------------------------
# Media Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_media() -> MediaPayload:
    """A small fake MP3 payload."""
    data = b"ID3" + b"\x00" * 1021
    return MediaPayload(data=data, content_type="audio/mpeg", size_bytes=len(data))


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created.

    ``StaticPool`` keeps a single connection so every session sees the
    same in-memory database.
    """
    from src.services.storage.database import init_db

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def sql_database(db_engine):
    """Point the storage module's singletons at the in-memory engine."""
    from src.services.storage import database

    database._engine = db_engine
    database._session_factory = None
    yield db_engine
    database.reset_engine()
