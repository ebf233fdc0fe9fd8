"""Generation backend layer: Ollama, Anthropic and OpenAI-compatible behind a common protocol."""

from hwextract.config import Settings, get_settings
from hwextract.errors import BackendConfigError
from hwextract.llm.anthropic_provider import AnthropicProvider
from hwextract.llm.base import LLMBackend
from hwextract.llm.ollama_backend import OllamaBackend
from hwextract.llm.openai_provider import OpenAIProvider

BACKENDS = ("ollama", "anthropic", "openai_compat")


def get_backend(
    backend_name: str | None = None,
    settings: Settings | None = None,
    **kwargs: object,
) -> LLMBackend:
    """Return the configured backend. backend_name: 'ollama' | 'anthropic' | 'openai_compat'.

    Falls back to ``settings.hwx_llm_backend`` when no name is given. Extra
    kwargs (e.g. ``http_client``) override the settings-derived constructor args.
    """
    settings = settings or get_settings()
    name = (backend_name or settings.hwx_llm_backend).lower()
    timeout = settings.hwx_llm_timeout

    if name == "ollama":
        args = {
            "endpoint": settings.hwx_ollama_endpoint,
            "model": settings.hwx_ollama_model,
            "timeout": timeout,
        }
        return OllamaBackend(**{**args, **kwargs})
    if name == "anthropic":
        args = {
            "api_key": settings.anthropic_api_key,
            "model": settings.hwx_anthropic_model,
            "base_url": settings.hwx_anthropic_base_url,
            "api_version": settings.hwx_anthropic_version,
            "timeout": timeout,
        }
        return AnthropicProvider(**{**args, **kwargs})
    if name == "openai_compat":
        args = {
            "endpoint": settings.hwx_openai_compat_endpoint,
            "model": settings.hwx_openai_compat_model,
            "api_key": settings.openai_api_key,
            "timeout": timeout,
        }
        return OpenAIProvider(**{**args, **kwargs})
    raise BackendConfigError(
        name, f"llm backend must be one of: {', '.join(BACKENDS)} (got {name!r})"
    )


__all__ = [
    "BACKENDS",
    "LLMBackend",
    "OllamaBackend",
    "AnthropicProvider",
    "OpenAIProvider",
    "get_backend",
]
