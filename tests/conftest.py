"""Pytest configuration and shared fixtures."""

import json

import httpx
import pytest

from hwextract.schemas.models import GenerationRequest, GenerationResponse


class FakeBackend:
    """Scripted backend: returns (or raises) queued items in order and records each request."""

    name = "fake"

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[GenerationRequest] = []
        self.timeouts: list[float | None] = []

    def generate(self, request: GenerationRequest, *, timeout=None) -> GenerationResponse:
        self.requests.append(request)
        self.timeouts.append(timeout)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, dict):
            item = json.dumps(item)
        return GenerationResponse(content=item, model="fake-model")


class RecordingTransport:
    """httpx.MockTransport wrapper that keeps every request and replies with a canned response."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=self.transport)


@pytest.fixture
def fake_backend():
    """Factory: fake_backend("ram", {...}) -> FakeBackend with those responses queued."""
    return FakeBackend


@pytest.fixture
def mock_http():
    """Factory: mock_http(handler) -> RecordingTransport."""
    return RecordingTransport


@pytest.fixture(autouse=True)
def _no_provider_env(monkeypatch):
    """Keep real API keys in the environment from leaking into backend tests."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("HWX_LLM_BACKEND", raising=False)
    monkeypatch.delenv("HWX_LOG_LEVEL", raising=False)
