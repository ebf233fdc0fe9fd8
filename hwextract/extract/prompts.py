"""Prompt templates per component category, rendered with Jinja2.

Templates live in ``hwextract/prompts/`` and are compiled once into a
``TemplateRegistry``; the registry is read-only after construction and shared
by every extraction call.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from hwextract.errors import UnsupportedCategoryError
from hwextract.schemas.models import ComponentCategory

PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"

CLASSIFY_TEMPLATE = "classify.j2"
EXTRACT_TEMPLATES: Mapping[ComponentCategory, str] = MappingProxyType({
    ComponentCategory.RAM: "extract_ram.j2",
    ComponentCategory.DRIVE: "extract_drive.j2",
    ComponentCategory.SERVER: "extract_server.j2",
    ComponentCategory.CPU: "extract_cpu.j2",
    ComponentCategory.NIC: "extract_nic.j2",
})

DESCRIPTION_MAX_CHARS = 500
NO_SPECIFICS = "N/A"


def format_item_specifics(specifics: Mapping[str, str] | None) -> str:
    """Flatten item specifics into ``"key: value, key: value"``; ``"N/A"`` when empty."""
    if not specifics:
        return NO_SPECIFICS
    return ", ".join(f"{k}: {v}" for k, v in specifics.items())


class TemplateRegistry:
    """One compiled template per extractable category plus the classifier prompt."""

    def __init__(self, prompts_dir: Path = PROMPTS_DIR):
        env = Environment(
            loader=FileSystemLoader(str(prompts_dir)),
            trim_blocks=True,
            undefined=StrictUndefined,
        )
        self._classify = env.get_template(CLASSIFY_TEMPLATE)
        self._extract: Mapping[ComponentCategory, Template] = MappingProxyType(
            {cat: env.get_template(name) for cat, name in EXTRACT_TEMPLATES.items()}
        )

    @property
    def categories(self) -> frozenset[ComponentCategory]:
        return frozenset(self._extract)

    def extract_template(self, category: ComponentCategory | str) -> Template:
        try:
            return self._extract[ComponentCategory(category)]
        except (KeyError, ValueError):
            raise UnsupportedCategoryError(category) from None

    def render_classify_prompt(self, title: str) -> str:
        return self._classify.render(title=title)

    def render_extract_prompt(
        self,
        category: ComponentCategory | str,
        title: str,
        specifics: Mapping[str, str] | None = None,
    ) -> str:
        """Render the extraction prompt; raises UnsupportedCategoryError for ``other`` and unknowns."""
        template = self.extract_template(category)
        return template.render(
            title=title,
            item_specifics=format_item_specifics(specifics),
            description="",
        )

    def render_server_extract_prompt(
        self,
        title: str,
        specifics: Mapping[str, str] | None = None,
        description: str = "",
    ) -> str:
        """Server prompt with the (truncated) listing description injected."""
        template = self._extract[ComponentCategory.SERVER]
        return template.render(
            title=title,
            item_specifics=format_item_specifics(specifics),
            description=(description or "")[:DESCRIPTION_MAX_CHARS],
        )


# Compiled once at import; never mutated afterwards.
DEFAULT_REGISTRY = TemplateRegistry()


def get_registry() -> TemplateRegistry:
    return DEFAULT_REGISTRY


def render_classify_prompt(title: str) -> str:
    return get_registry().render_classify_prompt(title)


def render_extract_prompt(
    category: ComponentCategory | str,
    title: str,
    specifics: Mapping[str, str] | None = None,
) -> str:
    return get_registry().render_extract_prompt(category, title, specifics)


def render_server_extract_prompt(
    title: str,
    specifics: Mapping[str, str] | None = None,
    description: str = "",
) -> str:
    return get_registry().render_server_extract_prompt(title, specifics, description)
