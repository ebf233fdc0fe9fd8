"""Request, response and enum models shared by the backends and the extraction pipeline."""

from hwextract.schemas.models import (
    FORMAT_JSON,
    AttributeRecord,
    ComponentCategory,
    Condition,
    GenerationRequest,
    GenerationResponse,
    TokenUsage,
)

__all__ = [
    "FORMAT_JSON",
    "AttributeRecord",
    "ComponentCategory",
    "Condition",
    "GenerationRequest",
    "GenerationResponse",
    "TokenUsage",
]
