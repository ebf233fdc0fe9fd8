"""Pydantic models: generation requests/responses and the closed category/condition enums."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

FORMAT_JSON = "json"

# Attribute records stay open dicts: the field set differs per category.
AttributeRecord = dict[str, Any]


class ComponentCategory(str, Enum):
    RAM = "ram"
    DRIVE = "drive"
    SERVER = "server"
    CPU = "cpu"
    NIC = "nic"
    OTHER = "other"


class Condition(str, Enum):
    NEW = "new"
    LIKE_NEW = "like_new"
    USED_WORKING = "used_working"
    FOR_PARTS = "for_parts"
    UNKNOWN = "unknown"


class GenerationRequest(BaseModel):
    """Input for a single backend generation call."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    system: str = ""
    format: Literal["", "json"] = ""  # "json" asks the backend for JSON mode
    temperature: float = 0.0  # 0 means "provider default"; never sent
    max_tokens: int = Field(default=0, ge=0)  # 0 means "adapter default"

    @property
    def wants_json(self) -> bool:
        return self.format == FORMAT_JSON


class TokenUsage(BaseModel):
    """Token counters; best-effort, zero when the provider omits them."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class GenerationResponse(BaseModel):
    """Uniform result of a backend generation call."""

    model_config = ConfigDict(frozen=True)

    content: str = ""
    model: str = ""
    usage: TokenUsage = TokenUsage()
