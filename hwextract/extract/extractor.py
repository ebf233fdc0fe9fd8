"""Listing classification and attribute extraction through a generation backend.

Flow per call: classify -> render category prompt -> generate (JSON mode) ->
parse -> validate -> (RAM only) speed backfill. Each stage wraps failures in
``StageError`` so the message reads like ``extracting: validating extraction:
capacity_gb: missing required field`` while the typed cause stays available.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from hwextract.errors import (
    ExtractionError,
    InvalidCategoryError,
    ParseError,
    StageError,
    UnsupportedCategoryError,
)
from hwextract.extract.prompts import TemplateRegistry, get_registry
from hwextract.extract.speed import normalize_ram_speed
from hwextract.extract.validate import validate_extraction
from hwextract.llm.base import LLMBackend
from hwextract.schemas.models import (
    FORMAT_JSON,
    AttributeRecord,
    ComponentCategory,
    GenerationRequest,
)

logger = logging.getLogger(__name__)

CLASSIFY_MAX_TOKENS = 50

CATEGORY_LOOKUP: Mapping[str, ComponentCategory] = MappingProxyType(
    {c.value: c for c in ComponentCategory}
)


def _strip_code_fence(raw: str) -> str:
    s = raw.strip()
    if s.startswith("```"):
        s = re.sub(r"^```\w*\n?", "", s)
        s = re.sub(r"\n?```\s*$", "", s)
    return s.strip()


def _decode_float(text: str) -> int | float:
    # Integral floats ("2666.0") become ints so every record uses one representation.
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text} overflows a float")
    return int(value) if value.is_integer() else value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not allowed")


def parse_attributes(raw: str) -> AttributeRecord:
    """Parse model output into an attribute record; raises ParseError unless it is a JSON object."""
    try:
        data = json.loads(
            _strip_code_fence(raw),
            parse_float=_decode_float,
            parse_constant=_reject_constant,
        )
    except ValueError as e:
        raise ParseError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _coerce_category(category: ComponentCategory | str) -> ComponentCategory:
    try:
        return ComponentCategory(category)
    except ValueError:
        raise UnsupportedCategoryError(category) from None


class Extractor:
    """Classifies listing titles and extracts validated attribute records.

    Holds no per-call state; one instance may serve concurrent calls.
    """

    def __init__(
        self,
        backend: LLMBackend,
        *,
        temperature: float = 0.1,
        max_tokens: int = 512,
        timeout: float | None = None,
        registry: TemplateRegistry | None = None,
    ):
        self._backend = backend
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._registry = registry or get_registry()

    @property
    def backend(self) -> LLMBackend:
        return self._backend

    def classify(self, title: str, *, timeout: float | None = None) -> ComponentCategory:
        """Ask the backend which component category a listing title belongs to."""
        prompt = self._registry.render_classify_prompt(title)
        try:
            resp = self._backend.generate(
                GenerationRequest(
                    prompt=prompt,
                    temperature=self._temperature,
                    max_tokens=CLASSIFY_MAX_TOKENS,
                ),
                timeout=timeout if timeout is not None else self._timeout,
            )
        except ExtractionError as e:
            raise StageError("calling LLM for classification", e) from e

        parsed = resp.content.strip().lower()
        logger.debug("classify response title=%r raw=%r parsed=%r", title, resp.content, parsed)

        category = CATEGORY_LOOKUP.get(parsed)
        if category is None:
            logger.warning(
                "classify returned invalid component type title=%r raw=%r", title, resp.content
            )
            raise InvalidCategoryError(parsed)
        return category

    def extract(
        self,
        category: ComponentCategory | str,
        title: str,
        specifics: Mapping[str, str] | None = None,
        *,
        description: str = "",
        timeout: float | None = None,
    ) -> AttributeRecord:
        """Extract and validate attributes for a title of a known category.

        ``description`` is only used for servers. ``other`` has no schema and
        always fails with UnsupportedCategoryError.
        """
        try:
            cat = _coerce_category(category)
            if cat is ComponentCategory.SERVER and description:
                prompt = self._registry.render_server_extract_prompt(title, specifics, description)
            else:
                prompt = self._registry.render_extract_prompt(cat, title, specifics)
        except UnsupportedCategoryError as e:
            raise StageError("rendering extract prompt", e) from e

        try:
            resp = self._backend.generate(
                GenerationRequest(
                    prompt=prompt,
                    format=FORMAT_JSON,
                    temperature=self._temperature,
                    max_tokens=self._max_tokens,
                ),
                timeout=timeout if timeout is not None else self._timeout,
            )
        except ExtractionError as e:
            raise StageError("calling LLM for extraction", e) from e

        logger.debug(
            "extract response category=%s title=%r raw=%r", cat.value, title, resp.content
        )

        try:
            attrs = parse_attributes(resp.content)
        except ParseError as e:
            logger.warning(
                "extract JSON parse failed category=%s title=%r raw=%r error=%s",
                cat.value, title, resp.content, e,
            )
            raise StageError("parsing LLM JSON response", e) from e

        try:
            record = validate_extraction(cat, attrs)
        except ExtractionError as e:
            logger.warning(
                "extract validation failed category=%s title=%r raw=%r error=%s",
                cat.value, title, resp.content, e,
            )
            raise StageError("validating extraction", e) from e

        if cat is ComponentCategory.RAM and not normalize_ram_speed(title, record):
            logger.debug("no RAM speed found in title=%r", title)

        return record

    def classify_and_extract(
        self,
        title: str,
        specifics: Mapping[str, str] | None = None,
        *,
        description: str = "",
        timeout: float | None = None,
    ) -> tuple[ComponentCategory, AttributeRecord]:
        """Classify then extract. On extraction failure the StageError carries ``category``."""
        try:
            category = self.classify(title, timeout=timeout)
        except ExtractionError as e:
            raise StageError("classifying", e) from e

        try:
            record = self.extract(
                category, title, specifics, description=description, timeout=timeout
            )
        except ExtractionError as e:
            raise StageError("extracting", e, category=category) from e

        logger.debug(
            "classify and extract complete title=%r category=%s attribute_count=%d",
            title, category.value, len(record),
        )
        return category, record
