"""Classification, attribute extraction, validation and product keys for listing titles."""

from hwextract.extract.condition import normalize_condition
from hwextract.extract.extractor import Extractor, parse_attributes
from hwextract.extract.product_key import product_key
from hwextract.extract.prompts import (
    TemplateRegistry,
    format_item_specifics,
    render_classify_prompt,
    render_extract_prompt,
    render_server_extract_prompt,
)
from hwextract.extract.speed import extract_speed_from_title, normalize_ram_speed, pc_module_to_mhz
from hwextract.extract.validate import validate_extraction

__all__ = [
    "Extractor",
    "TemplateRegistry",
    "extract_speed_from_title",
    "format_item_specifics",
    "normalize_condition",
    "normalize_ram_speed",
    "parse_attributes",
    "pc_module_to_mhz",
    "product_key",
    "render_classify_prompt",
    "render_extract_prompt",
    "render_server_extract_prompt",
    "validate_extraction",
]
