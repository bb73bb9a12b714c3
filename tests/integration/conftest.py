"""Integration fixtures: the real app with provider and network faked.

The summarization service is built from real components (catalog, media
fetcher, generator, store); only the HTTP transports and the model
provider are replaced.
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.api.routes.summarize import get_summarization_service
from src.services.llm import ModelCatalog
from src.services.media import MediaFetcher
from src.services.storage import InMemorySummaryStore
from src.services.summarization import RetryPolicy, SummarizationService, SummaryGenerator

RECORDING_URL = "https://cdn.example.com/calls/call-1/recording.mp4"
RECORDING_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 4084


def _recording_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("recording.mp4"):
        return httpx.Response(200, content=RECORDING_BYTES, headers={"content-type": "video/mp4"})
    return httpx.Response(404)


def _models_handler(names: list[str]):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"models": [{"name": f"models/{n}"} for n in names]})

    return handler


@pytest.fixture
def build_service():
    """Assemble a service around a scripted LLM and faked HTTP transports."""

    def _build(llm, store=None, models: list[str] | None = None) -> SummarizationService:
        models = ["gemini-1.5-flash"] if models is None else models
        catalog = ModelCatalog(
            api_key="test-key",
            base_url="https://generativelanguage.example.com/v1beta",
            fallback_models=["gemini-pro"],
            client=httpx.AsyncClient(transport=httpx.MockTransport(_models_handler(models))),
        )
        fetcher = MediaFetcher(
            client=httpx.AsyncClient(transport=httpx.MockTransport(_recording_handler))
        )
        return SummarizationService(
            llm=llm,
            catalog=catalog,
            fetcher=fetcher,
            store=store,
            generator=SummaryGenerator(llm, policy=RetryPolicy(backoff_unit=0)),
        )

    return _build


@pytest.fixture
def memory_store():
    return InMemorySummaryStore()


@pytest.fixture
def app():
    """Create a fresh FastAPI application instance."""
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def use_service(app):
    """Route POST /api/v1/summarize to the given service."""

    def _use(service: SummarizationService) -> SummarizationService:
        app.dependency_overrides[get_summarization_service] = lambda: service
        return service

    return _use
