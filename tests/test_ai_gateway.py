import pytest
import requests

from src.app.config.settings import Settings
from src.app.utils.ai_gateway import (
    AIEmptyResponseError,
    AIGatewayClient,
    AINotConfiguredError,
    AIPaymentRequiredError,
    AIRateLimitError,
    AIServiceUnavailableError,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class RecordingSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


MESSAGES = [{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}]


def _client(session, **overrides):
    settings = Settings(ai_gateway_api_key="key-123", ai_model="test-model", **overrides)
    return AIGatewayClient(settings, session=session)


def test_returns_first_message_content_and_sends_request_fields():
    session = RecordingSession(FakeResponse(payload={"choices": [{"message": {"content": "hello"}}]}))
    client = _client(session)

    assert client.chat(MESSAGES, temperature=0, seed=42) == "hello"

    sent = session.requests[0]
    assert sent["json"] == {"model": "test-model", "messages": MESSAGES, "temperature": 0, "seed": 42}
    assert sent["headers"]["Authorization"] == "Bearer key-123"
    assert sent["timeout"] is None


def test_seed_is_omitted_when_not_given():
    session = RecordingSession(FakeResponse(payload={"choices": [{"message": {"content": "x"}}]}))
    _client(session).chat(MESSAGES, temperature=0.7)
    assert "seed" not in session.requests[0]["json"]


@pytest.mark.parametrize("status_code, error", [
    (429, AIRateLimitError),
    (402, AIPaymentRequiredError),
    (500, AIServiceUnavailableError),
    (503, AIServiceUnavailableError),
])
def test_http_errors_are_distinguished(status_code, error):
    session = RecordingSession(FakeResponse(status_code=status_code, text="upstream body"))
    with pytest.raises(error) as excinfo:
        _client(session).chat(MESSAGES, temperature=0.7)
    # upstream body is logged, not exposed
    assert "upstream body" not in excinfo.value.message
    assert len(session.requests) == 1


def test_transport_failure_is_not_retried():
    session = RecordingSession(error=requests.ConnectionError("boom"))
    with pytest.raises(AIServiceUnavailableError):
        _client(session).chat(MESSAGES, temperature=0.7)
    assert len(session.requests) == 1


def test_empty_content_is_an_error():
    session = RecordingSession(FakeResponse(payload={"choices": []}))
    with pytest.raises(AIEmptyResponseError):
        _client(session).chat(MESSAGES, temperature=0.7)


def test_missing_api_key_fails_without_network_call():
    session = RecordingSession()
    client = AIGatewayClient(Settings(ai_gateway_api_key=None), session=session)
    with pytest.raises(AINotConfiguredError):
        client.chat(MESSAGES, temperature=0.7)
    assert session.requests == []


def test_configured_timeout_is_passed_through():
    session = RecordingSession(FakeResponse(payload={"choices": [{"message": {"content": "x"}}]}))
    _client(session, ai_request_timeout=12.5).chat(MESSAGES, temperature=0.7)
    assert session.requests[0]["timeout"] == 12.5
