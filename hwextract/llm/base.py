"""Abstract generation backend protocol."""

from __future__ import annotations

import json
from typing import Any, Protocol

from hwextract.errors import ResponseParseError
from hwextract.schemas.models import GenerationRequest, GenerationResponse

DEFAULT_TIMEOUT = 60.0


class LLMBackend(Protocol):
    """Protocol for text-generation backends (Ollama, Anthropic, OpenAI-compatible)."""

    @property
    def name(self) -> str:
        """Stable backend identity, e.g. ``"ollama"``."""
        ...

    def generate(
        self, request: GenerationRequest, *, timeout: float | None = None
    ) -> GenerationResponse:
        """Run one generation. ``timeout`` is the caller's deadline in seconds."""
        ...


def decode_body(backend: str, text: str) -> dict[str, Any]:
    """Decode a provider response envelope; anything but a JSON object is a parse error."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResponseParseError(backend, f"parsing {backend} response: {e}") from e
    if not isinstance(data, dict):
        raise ResponseParseError(
            backend, f"parsing {backend} response: expected object, got {type(data).__name__}"
        )
    return data


def usage_int(value: Any) -> int:
    """Token counters are best-effort: anything non-numeric counts as zero."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)
