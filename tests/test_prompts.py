"""Tests for prompt template rendering."""

import pytest
from jinja2 import TemplateNotFound

from hwextract.errors import UnsupportedCategoryError
from hwextract.extract.prompts import (
    DESCRIPTION_MAX_CHARS,
    EXTRACT_TEMPLATES,
    TemplateRegistry,
    format_item_specifics,
    get_registry,
    render_classify_prompt,
    render_extract_prompt,
    render_server_extract_prompt,
)
from hwextract.schemas.models import ComponentCategory

EXTRACTABLE = ["ram", "drive", "server", "cpu", "nic"]


def test_format_item_specifics():
    assert format_item_specifics({"Brand": "Samsung", "Capacity": "32GB"}) == "Brand: Samsung, Capacity: 32GB"


@pytest.mark.parametrize("specifics", [None, {}])
def test_format_item_specifics_empty(specifics):
    assert format_item_specifics(specifics) == "N/A"


def test_classify_prompt_lists_categories():
    prompt = render_classify_prompt("Dell PowerEdge R740 2x Gold 6130")
    assert "Title: Dell PowerEdge R740 2x Gold 6130" in prompt
    assert "ram, drive, server, cpu, nic, other" in prompt
    assert "{{" not in prompt


@pytest.mark.parametrize("category", EXTRACTABLE)
def test_extract_prompt_has_title_and_specifics(category):
    prompt = render_extract_prompt(category, "Some Listing Title", {"Brand": "HPE"})
    assert "Title: Some Listing Title" in prompt
    assert "Item Specifics: Brand: HPE" in prompt
    assert "Schema:" in prompt
    assert '"condition"' in prompt
    assert "{%" not in prompt and "{{" not in prompt


@pytest.mark.parametrize("category", EXTRACTABLE)
def test_extract_prompt_without_specifics(category):
    prompt = render_extract_prompt(category, "t")
    assert "Item Specifics: N/A" in prompt


def test_ram_prompt_carries_pc_module_table():
    prompt = render_extract_prompt(ComponentCategory.RAM, "Samsung 32GB PC4-21300V")
    assert "PC4-21300=2666" in prompt
    assert "PC5-51200=6400" in prompt
    assert '"speed_mhz"' in prompt


@pytest.mark.parametrize("category", ["other", "gpu", ""])
def test_unsupported_category(category):
    with pytest.raises(UnsupportedCategoryError) as exc:
        render_extract_prompt(category, "GPU listing")
    assert "no extraction prompt" in str(exc.value)


class TestServerPrompt:

    def test_description_included(self):
        prompt = render_server_extract_prompt("Dell R740", None, "Two PSUs, rails included.")
        assert "Description (first 500 chars): Two PSUs, rails included." in prompt

    def test_description_truncated(self):
        description = "a" * DESCRIPTION_MAX_CHARS + "TAIL"
        prompt = render_server_extract_prompt("Dell R740", None, description)
        assert "a" * DESCRIPTION_MAX_CHARS in prompt
        assert "TAIL" not in prompt

    def test_plain_server_prompt_has_empty_description(self):
        prompt = render_extract_prompt("server", "Dell R740")
        assert "Description (first 500 chars):" in prompt


class TestRegistry:

    def test_covers_every_extractable_category(self):
        assert get_registry().categories == {ComponentCategory(c) for c in EXTRACTABLE}

    def test_shared_instance(self):
        assert get_registry() is get_registry()

    def test_template_table_is_read_only(self):
        with pytest.raises(TypeError):
            EXTRACT_TEMPLATES[ComponentCategory.OTHER] = "extract_other.j2"  # type: ignore[index]

    def test_custom_prompts_dir(self, tmp_path):
        (tmp_path / "classify.j2").write_text("C {{ title }}")
        for name in EXTRACT_TEMPLATES.values():
            (tmp_path / name).write_text("E {{ title }} / {{ item_specifics }}{{ description }}")
        registry = TemplateRegistry(tmp_path)
        assert registry.render_classify_prompt("x") == "C x"
        assert registry.render_extract_prompt("nic", "y", {"a": "b"}) == "E y / a: b"

    def test_missing_template_fails_at_construction(self, tmp_path):
        (tmp_path / "classify.j2").write_text("C {{ title }}")
        with pytest.raises(TemplateNotFound):
            TemplateRegistry(tmp_path)
