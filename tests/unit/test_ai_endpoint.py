"""
Unit tests for the AI normalization endpoint client.

requests.post is replaced with a fake so no network access happens.
"""

import pytest
import requests

from anken.contexts.autofill.exceptions import AINormalizationError
from anken.utils.ai_endpoint import (
    NORMALIZATION_INSTRUCTION,
    HttpNormalizationEndpoint,
    _retry_with_backoff,
    build_normalization_request,
    get_endpoint,
    parse_json_object,
)
from anken.utils.config import AutofillSettings

URL = "http://localhost:8080/normalize"


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class FakePost:
    """Stand-in for requests.post that replays scripted outcomes."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def no_sleep(monkeypatch):
    delays = []
    monkeypatch.setattr("anken.utils.ai_endpoint.time.sleep", delays.append)
    return delays


def install_post(monkeypatch, *outcomes) -> FakePost:
    fake = FakePost(*outcomes)
    monkeypatch.setattr("anken.utils.ai_endpoint.requests.post", fake)
    return fake


class TestParseJsonObject:
    """Tests for parse_json_object."""

    def test_plain_object(self):
        """A bare JSON object is returned as a dict."""
        assert parse_json_object('{"title": "EC刷新"}') == {"title": "EC刷新"}

    def test_object_inside_code_fence(self):
        """Markdown code fences around the object are ignored."""
        text = '```json\n{"budgetMin": 80}\n```'
        assert parse_json_object(text) == {"budgetMin": 80}

    @pytest.mark.parametrize("text", ["[1, 2]", "not json", "", None])
    def test_not_an_object(self, text):
        """Arrays, prose and empty bodies are rejected."""
        with pytest.raises(AINormalizationError, match="not a JSON object"):
            parse_json_object(text)


class TestBuildNormalizationRequest:
    """Tests for build_normalization_request."""

    def test_with_raw_text(self):
        """The payload carries the instruction, the draft and the raw text."""
        payload = build_normalization_request({"title": "A"}, "raw posting")

        assert payload == {
            "instruction": NORMALIZATION_INSTRUCTION,
            "data": {"title": "A"},
            "rawText": "raw posting",
        }

    def test_without_raw_text(self):
        """rawText is left out when there is none."""
        assert "rawText" not in build_normalization_request({})


class TestRetryWithBackoff:
    """Tests for _retry_with_backoff."""

    def test_delays_double(self, no_sleep):
        """Waits double between attempts and the last error propagates."""
        def always_fails():
            raise ConnectionError("down")

        with pytest.raises(ConnectionError):
            _retry_with_backoff(always_fails, ConnectionError, "Connection failed", max_retries=3)

        assert no_sleep == [1.0, 2.0]

    def test_other_exceptions_not_retried(self, no_sleep):
        """Only the retryable exception type triggers a retry."""
        def broken():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            _retry_with_backoff(broken, ConnectionError, "Connection failed")

        assert no_sleep == []


class TestHttpNormalizationEndpoint:
    """Tests for HttpNormalizationEndpoint.normalize."""

    def test_empty_url_rejected(self):
        """An endpoint needs a URL."""
        with pytest.raises(ValueError):
            HttpNormalizationEndpoint("")

    def test_successful_call(self, monkeypatch):
        """JSON body, timeout and bearer token are sent; the object comes back."""
        fake = install_post(monkeypatch, FakeResponse(200, '{"location": "渋谷"}'))
        endpoint = HttpNormalizationEndpoint(URL, timeout_s=5.0, api_key="secret")

        result = endpoint.normalize({"title": "A"}, "raw")

        assert result == {"location": "渋谷"}
        url, kwargs = fake.calls[0]
        assert url == URL
        assert kwargs["timeout"] == 5.0
        assert kwargs["json"]["data"] == {"title": "A"}
        assert kwargs["headers"]["Authorization"] == "Bearer secret"

    def test_no_auth_header_without_key(self, monkeypatch):
        """No API key means no Authorization header."""
        monkeypatch.delenv("AI_NORMALIZE_API_KEY", raising=False)
        fake = install_post(monkeypatch, FakeResponse(200, "{}"))

        HttpNormalizationEndpoint(URL).normalize({})

        assert "Authorization" not in fake.calls[0][1]["headers"]

    def test_error_status(self, monkeypatch, no_sleep):
        """A non-2xx status fails at once with the status code."""
        fake = install_post(monkeypatch, FakeResponse(502, "Bad Gateway"))

        with pytest.raises(AINormalizationError) as exc_info:
            HttpNormalizationEndpoint(URL, api_key="").normalize({})

        assert exc_info.value.status_code == 502
        assert len(fake.calls) == 1

    def test_timeout(self, monkeypatch, no_sleep):
        """A timeout becomes AINormalizationError."""
        install_post(monkeypatch, requests.Timeout("slow"))

        with pytest.raises(AINormalizationError, match="timed out"):
            HttpNormalizationEndpoint(URL, timeout_s=3, api_key="").normalize({})

    def test_invalid_body(self, monkeypatch):
        """A body that is not a JSON object is an error."""
        install_post(monkeypatch, FakeResponse(200, "<html>oops</html>"))

        with pytest.raises(AINormalizationError, match="not a JSON object"):
            HttpNormalizationEndpoint(URL, api_key="").normalize({})

    def test_connection_error_retried_then_succeeds(self, monkeypatch, no_sleep):
        """A dropped connection is retried once and then succeeds."""
        fake = install_post(
            monkeypatch, requests.ConnectionError("reset"), FakeResponse(200, '{"title": "B"}')
        )

        result = HttpNormalizationEndpoint(URL, api_key="").normalize({})

        assert result == {"title": "B"}
        assert len(fake.calls) == 2
        assert no_sleep == [1.0]

    def test_connection_error_exhausts_retries(self, monkeypatch, no_sleep):
        """After max_retries attempts the connection error is wrapped."""
        fake = install_post(monkeypatch, requests.ConnectionError("refused"))

        with pytest.raises(AINormalizationError) as exc_info:
            HttpNormalizationEndpoint(URL, max_retries=3, api_key="").normalize({})

        assert len(fake.calls) == 3
        assert isinstance(exc_info.value.original_error, requests.ConnectionError)
        assert exc_info.value.endpoint == URL


class TestGetEndpoint:
    """Tests for get_endpoint."""

    def test_requires_url(self):
        """Without a configured URL there is no endpoint."""
        with pytest.raises(AINormalizationError, match="No AI endpoint configured"):
            get_endpoint(AutofillSettings())

    def test_built_from_settings(self):
        """URL, timeout and retries come from the settings."""
        settings = AutofillSettings(endpoint_url=URL, endpoint_timeout_s=7.5, max_retries=2)

        endpoint = get_endpoint(settings)

        assert isinstance(endpoint, HttpNormalizationEndpoint)
        assert endpoint.url == URL
        assert endpoint.timeout_s == 7.5
        assert endpoint.max_retries == 2
