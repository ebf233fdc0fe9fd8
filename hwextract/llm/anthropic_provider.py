"""Anthropic Messages API backend built on the anthropic SDK (raw response mode)."""

from __future__ import annotations

import json
import logging
import os
from typing import Any

import httpx
from anthropic import Anthropic, APIConnectionError, APIStatusError, APITimeoutError

from hwextract.errors import (
    BackendConfigError,
    BackendUnavailable,
    EmptyResponseError,
    GenerationTimeout,
    ProviderError,
)
from hwextract.llm.base import DEFAULT_TIMEOUT, decode_body, usage_int
from hwextract.schemas.models import GenerationRequest, GenerationResponse, TokenUsage

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 512


def _error_detail(body: str) -> str | None:
    """Pull ``type: message`` out of an Anthropic error envelope, if there is one."""
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return None
    err = data.get("error") if isinstance(data, dict) else None
    if not isinstance(err, dict) or not err.get("message"):
        return None
    return f"{err.get('type', '')}: {err['message']}"


class AnthropicProvider:
    """Claude via the Messages API. The API key is required before any network call."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-haiku-4-5",
        base_url: str = "https://api.anthropic.com",
        api_version: str = "2023-06-01",
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._api_key = api_key if api_key is not None else os.environ.get("ANTHROPIC_API_KEY", "")
        self._model = model
        self._client = Anthropic(
            api_key=self._api_key or None,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            default_headers={"anthropic-version": api_version},
            http_client=http_client,
        )

    @property
    def name(self) -> str:
        return "anthropic"

    def build_body(self, request: GenerationRequest) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self._model,
            "max_tokens": request.max_tokens if request.max_tokens > 0 else DEFAULT_MAX_TOKENS,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.system:
            body["system"] = request.system
        if request.temperature > 0:
            body["temperature"] = request.temperature
        return body

    def generate(
        self, request: GenerationRequest, *, timeout: float | None = None
    ) -> GenerationResponse:
        if not self._api_key:
            raise BackendConfigError(self.name, "ANTHROPIC_API_KEY is not set")

        kwargs = self.build_body(request)
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            raw = self._client.messages.with_raw_response.create(**kwargs)
        except APIStatusError as e:
            body = e.response.text
            raise ProviderError(self.name, e.status_code, body, _error_detail(body)) from e
        except APITimeoutError as e:
            raise GenerationTimeout(self.name, f"calling anthropic API: deadline exceeded: {e}") from e
        except APIConnectionError as e:
            raise BackendUnavailable(self.name, f"calling anthropic API: {e}") from e

        data = decode_body(self.name, raw.http_response.text)
        content = data.get("content")
        if not isinstance(content, list) or not content:
            raise EmptyResponseError(self.name)

        first = content[0] if isinstance(content[0], dict) else {}
        usage_data = data.get("usage") if isinstance(data.get("usage"), dict) else {}
        input_tokens = usage_int(usage_data.get("input_tokens"))
        output_tokens = usage_int(usage_data.get("output_tokens"))
        usage = TokenUsage(
            prompt_tokens=input_tokens,
            completion_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
        )
        logger.debug("anthropic generate done model=%s usage=%s", data.get("model"), usage)
        return GenerationResponse(
            content=str(first.get("text") or ""),
            model=str(data.get("model") or ""),
            usage=usage,
        )
