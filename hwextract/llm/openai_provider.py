"""OpenAI-compatible chat completions backend (OpenAI, vLLM, LM Studio, TGI).

Built on the openai SDK in raw response mode so the envelope is decoded here and
malformed or empty bodies surface as our own errors rather than SDK internals.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI

from hwextract.errors import (
    BackendUnavailable,
    EmptyResponseError,
    GenerationTimeout,
    ProviderError,
)
from hwextract.llm.base import DEFAULT_TIMEOUT, decode_body, usage_int
from hwextract.schemas.models import GenerationRequest, GenerationResponse, TokenUsage

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """Chat completions against ``{endpoint}/v1/chat/completions``. API key optional."""

    def __init__(
        self,
        endpoint: str = "http://localhost:8000",
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._model = model
        if api_key is None:
            api_key = os.environ.get("OPENAI_API_KEY", "")
        # An empty key sends no Authorization header.
        self._client = OpenAI(
            api_key=api_key,
            base_url=endpoint.rstrip("/") + "/v1",
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    @property
    def name(self) -> str:
        return "openai_compat"

    def build_body(self, request: GenerationRequest) -> dict[str, Any]:
        messages = [{"role": "user", "content": request.prompt}]
        if request.system:
            messages.insert(0, {"role": "system", "content": request.system})

        body: dict[str, Any] = {"model": self._model, "messages": messages}
        if request.temperature > 0:
            body["temperature"] = request.temperature
        if request.max_tokens > 0:
            body["max_tokens"] = request.max_tokens
        if request.wants_json:
            body["response_format"] = {"type": "json_object"}
        return body

    def generate(
        self, request: GenerationRequest, *, timeout: float | None = None
    ) -> GenerationResponse:
        kwargs = self.build_body(request)
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            raw = self._client.chat.completions.with_raw_response.create(**kwargs)
        except APIStatusError as e:
            raise ProviderError(self.name, e.status_code, e.response.text) from e
        except APITimeoutError as e:
            raise GenerationTimeout(
                self.name, f"calling openai-compatible API: deadline exceeded: {e}"
            ) from e
        except APIConnectionError as e:
            raise BackendUnavailable(self.name, f"calling openai-compatible API: {e}") from e

        data = decode_body(self.name, raw.http_response.text)
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise EmptyResponseError(self.name)

        choice = choices[0] if isinstance(choices[0], dict) else {}
        message = choice.get("message") if isinstance(choice.get("message"), dict) else {}
        usage_data = data.get("usage") if isinstance(data.get("usage"), dict) else {}
        usage = TokenUsage(
            prompt_tokens=usage_int(usage_data.get("prompt_tokens")),
            completion_tokens=usage_int(usage_data.get("completion_tokens")),
            total_tokens=usage_int(usage_data.get("total_tokens")),
        )
        logger.debug("openai_compat generate done model=%s usage=%s", data.get("model"), usage)
        return GenerationResponse(
            content=str(message.get("content") or ""),
            model=str(data.get("model") or ""),
            usage=usage,
        )
