"""Error taxonomy for classification, extraction and backend calls.

Everything raised by this package derives from ``ExtractionError`` so callers
can catch one type at the boundary. Orchestration stages wrap inner errors in
``StageError`` (``raise StageError(...) from exc``); the original error stays
reachable through ``cause`` / ``root_cause``.
"""

from __future__ import annotations

from typing import Any


class ExtractionError(Exception):
    """Base class for all hwextract errors."""


class UnsupportedCategoryError(ExtractionError):
    """No extraction template (and therefore no schema) exists for the category."""

    def __init__(self, category: Any):
        self.category = category
        value = getattr(category, "value", category)
        super().__init__(f"no extraction prompt for component type {value!r}")


class InvalidCategoryError(ExtractionError):
    """The classifier returned something outside the closed category set."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"invalid component type {raw!r} from LLM")


class ParseError(ExtractionError):
    """Malformed JSON, either in a provider envelope or in the attribute payload."""


class StageError(ExtractionError):
    """An inner error labelled with the orchestration stage it happened in."""

    def __init__(self, stage: str, cause: BaseException, category: Any = None):
        self.stage = stage
        self.cause = cause
        # Set by classify_and_extract when classification already succeeded.
        self.category = category
        super().__init__(f"{stage}: {cause}")

    @property
    def root_cause(self) -> BaseException:
        err: BaseException = self
        while isinstance(err, StageError):
            err = err.cause
        return err


# ---------------------------------------------------------------------------
# Attribute validation
# ---------------------------------------------------------------------------


class AttributeValidationError(ExtractionError):
    """A validated record broke a field rule. ``field`` names the offender."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class MissingFieldError(AttributeValidationError):
    def __init__(self, field: str):
        super().__init__(field, f"{field}: missing required field")


class OutOfRangeError(AttributeValidationError):
    def __init__(self, field: str, value: float, low: float, high: float | None = None):
        self.value = value
        self.low = low
        self.high = high
        bounds = f">= {low}" if high is None else f"{low}-{high}"
        super().__init__(field, f"{field} {value}: value out of valid range (must be {bounds})")


class InvalidEnumError(AttributeValidationError):
    def __init__(self, field: str, value: Any):
        self.value = value
        super().__init__(field, f"{field} {value!r}: invalid enum value")


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class BackendError(ExtractionError):
    """A generation backend failed. ``backend`` is the adapter name."""

    def __init__(self, backend: str, message: str):
        self.backend = backend
        super().__init__(message)


class BackendConfigError(BackendError):
    """Local precondition failure (missing API key, unknown backend name)."""


class BackendUnavailable(BackendError):
    """The transport could not reach the provider."""


class GenerationTimeout(BackendError):
    """The caller's deadline expired before the provider answered."""


class ProviderError(BackendError):
    """Provider answered with a non-success HTTP status."""

    def __init__(self, backend: str, status_code: int, body: str, detail: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(backend, f"{backend} API error (status {status_code}): {detail or body}")


class ResponseParseError(BackendError, ParseError):
    """Provider envelope was not well-formed JSON."""


class EmptyResponseError(BackendError):
    """Provider returned zero content items."""

    def __init__(self, backend: str):
        super().__init__(backend, f"empty response from {backend}")
