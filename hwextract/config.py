"""Configuration loaded from environment (.env) and defaults."""

from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Locate the project root .env file regardless of CWD
_THIS_DIR = Path(__file__).resolve().parent          # hwextract/
_PROJECT_ROOT = _THIS_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

BackendName = Literal["ollama", "anthropic", "openai_compat"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Generation backend: ollama | anthropic | openai_compat
    hwx_llm_backend: BackendName = "ollama"

    # Local generation server (Ollama /api/generate)
    hwx_ollama_endpoint: str = "http://localhost:11434"
    hwx_ollama_model: str = "mistral:7b-instruct-v0.3-q5_K_M"

    # Anthropic Messages API
    anthropic_api_key: str | None = None
    hwx_anthropic_model: str = "claude-haiku-4-5"
    hwx_anthropic_base_url: str = "https://api.anthropic.com"
    hwx_anthropic_version: str = "2023-06-01"

    # OpenAI-compatible chat completions (vLLM, LM Studio, TGI, OpenAI itself)
    openai_api_key: str | None = None
    hwx_openai_compat_endpoint: str = "http://localhost:8000"
    hwx_openai_compat_model: str = "gpt-4o-mini"

    # Per-call deadline in seconds applied to every generate() call
    hwx_llm_timeout: float = 30.0
    hwx_llm_temperature: float = 0.1
    hwx_llm_max_tokens: int = 512

    hwx_log_level: LogLevel = "INFO"

    @field_validator("hwx_log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


def get_settings() -> Settings:
    return Settings()
