"""Unit tests for provider failure classification."""

import pytest

from src.core.models import AttemptOutcome
from src.services.llm.base import LLMProviderError
from src.services.summarization.errors import classify_error, describe_failure


class TestClassifyByStatus:
    """A reported status code wins over the message."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (401, AttemptOutcome.invalid_credentials),
            (403, AttemptOutcome.invalid_credentials),
            (404, AttemptOutcome.model_unavailable),
            (429, AttemptOutcome.rate_limited),
        ],
    )
    def test_known_status(self, status, expected):
        assert classify_error(LLMProviderError("boom", status_code=status)) is expected

    def test_status_beats_message(self):
        exc = LLMProviderError("quota exceeded for model", status_code=404)
        assert classify_error(exc) is AttemptOutcome.model_unavailable


class TestClassifyByMessage:
    """Message markers are used when no known status is attached."""

    @pytest.mark.parametrize(
        "message",
        [
            "403 permission denied",
            "API key not valid. Please pass a valid API key.",
            "API_KEY_INVALID",
            "Unauthorized",
            "Forbidden",
            "invalid credentials supplied",
        ],
    )
    def test_credential_shapes(self, message):
        assert classify_error(RuntimeError(message)) is AttemptOutcome.invalid_credentials

    @pytest.mark.parametrize(
        "message",
        [
            "404 models/gemini-pro is not found for API version v1beta",
            "Model Not Found",
        ],
    )
    def test_not_found_shapes(self, message):
        assert classify_error(RuntimeError(message)) is AttemptOutcome.model_unavailable

    @pytest.mark.parametrize(
        "message",
        ["429 Too Many Requests", "Rate limit reached", "Quota exceeded", "RESOURCE_EXHAUSTED"],
    )
    def test_rate_limit_shapes(self, message):
        assert classify_error(RuntimeError(message)) is AttemptOutcome.rate_limited

    def test_everything_else_is_other(self):
        assert classify_error(RuntimeError("500 internal error")) is AttemptOutcome.other_failure

    def test_bare_invalid_is_not_a_credential_error(self):
        exc = RuntimeError("Invalid argument: request contains an invalid field")
        assert classify_error(exc) is AttemptOutcome.other_failure


class TestDescribeFailure:
    """User-facing hints for unclassified failures."""

    def test_format_hint(self):
        assert describe_failure("Unsupported mimeType video/x-foo").startswith(
            "Unsupported recording format"
        )

    def test_size_hint(self):
        assert describe_failure("Request payload too large").startswith(
            "Recording file is too large"
        )

    def test_generic_wraps_message(self):
        assert describe_failure("backend exploded") == "Failed to generate summary: backend exploded"
