"""Local generation backend speaking the Ollama ``/api/generate`` protocol over httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from hwextract.errors import BackendUnavailable, GenerationTimeout, ProviderError
from hwextract.llm.base import DEFAULT_TIMEOUT, decode_body, usage_int
from hwextract.schemas.models import FORMAT_JSON, GenerationRequest, GenerationResponse, TokenUsage

logger = logging.getLogger(__name__)


class OllamaBackend:
    """Single-prompt generation against a local Ollama server."""

    def __init__(
        self,
        endpoint: str = "http://localhost:11434",
        model: str = "mistral:7b-instruct-v0.3-q5_K_M",
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._endpoint = endpoint.rstrip("/")
        self._model = model
        self._client = http_client or httpx.Client(timeout=timeout)

    @property
    def name(self) -> str:
        return "ollama"

    def build_body(self, request: GenerationRequest) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self._model,
            "prompt": request.prompt,
            "stream": False,
        }
        if request.system:
            body["system"] = request.system
        if request.wants_json:
            body["format"] = FORMAT_JSON
        if request.temperature > 0:
            body["options"] = {"temperature": request.temperature}
        if request.max_tokens > 0:
            body["num_predict"] = request.max_tokens
        return body

    def generate(
        self, request: GenerationRequest, *, timeout: float | None = None
    ) -> GenerationResponse:
        url = f"{self._endpoint}/api/generate"
        kwargs: dict[str, Any] = {"json": self.build_body(request)}
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            response = self._client.post(url, **kwargs)
        except httpx.TimeoutException as e:
            raise GenerationTimeout(self.name, f"calling ollama: deadline exceeded: {e}") from e
        except httpx.TransportError as e:
            raise BackendUnavailable(self.name, f"calling ollama: {e}") from e

        if response.status_code != httpx.codes.OK:
            raise ProviderError(self.name, response.status_code, response.text)

        data = decode_body(self.name, response.text)
        prompt_tokens = usage_int(data.get("prompt_eval_count"))
        completion_tokens = usage_int(data.get("eval_count"))
        usage = TokenUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        )
        logger.debug("ollama generate done model=%s usage=%s", data.get("model"), usage)
        return GenerationResponse(
            content=str(data.get("response") or ""),
            model=str(data.get("model") or ""),
            usage=usage,
        )
