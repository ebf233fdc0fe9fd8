"""Schema validation for extracted attribute records.

Two phases: rules common to every category (condition, confidence, quantity),
then the category's own field rules. The first violation is raised; there is
no error aggregation. ``validate_extraction`` returns a normalized copy and
leaves the input untouched.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Literal

from hwextract.errors import InvalidEnumError, MissingFieldError, OutOfRangeError
from hwextract.extract.condition import normalize_condition
from hwextract.schemas.models import AttributeRecord, ComponentCategory


@dataclass(frozen=True)
class FieldRule:
    """Constraint on one attribute. Rules are checked in declaration order."""

    name: str
    kind: Literal["str", "int", "float"]
    required: bool = False
    non_empty: bool = False
    choices: frozenset[str] | None = None
    low: float | None = None
    high: float | None = None


CATEGORY_RULES: Mapping[ComponentCategory, tuple[FieldRule, ...]] = MappingProxyType({
    ComponentCategory.RAM: (
        FieldRule("capacity_gb", "int", required=True, low=1, high=1024),
        FieldRule("generation", "str", required=True, choices=frozenset({"DDR3", "DDR4", "DDR5"})),
        FieldRule("speed_mhz", "int", low=800, high=8400),
    ),
    ComponentCategory.DRIVE: (
        FieldRule("capacity", "str", required=True, non_empty=True),
        FieldRule("interface", "str", required=True, choices=frozenset({"SAS", "SATA", "NVMe", "U.2"})),
        FieldRule("form_factor", "str", choices=frozenset({"2.5", "3.5"})),
        FieldRule("type", "str", choices=frozenset({"SSD", "HDD"})),
    ),
    ComponentCategory.SERVER: (
        FieldRule("manufacturer", "str", required=True, non_empty=True),
        FieldRule("model", "str", required=True, non_empty=True),
        FieldRule("form_factor", "str", choices=frozenset({"1U", "2U", "4U", "tower"})),
    ),
    ComponentCategory.CPU: (
        FieldRule("manufacturer", "str", required=True, choices=frozenset({"Intel", "AMD"})),
        FieldRule("family", "str", required=True, choices=frozenset({"Xeon", "EPYC"})),
        FieldRule("model", "str", required=True, non_empty=True),
        FieldRule("cores", "int", low=1, high=256),
        FieldRule("base_clock_ghz", "float", low=0.5, high=6.0),
        FieldRule("tdp_watts", "int", low=10, high=500),
    ),
    ComponentCategory.NIC: (
        FieldRule(
            "speed", "str", required=True,
            choices=frozenset({"1GbE", "10GbE", "25GbE", "40GbE", "100GbE"}),
        ),
        FieldRule("port_count", "int", required=True, low=1, high=8),
        FieldRule(
            "port_type", "str",
            choices=frozenset({"SFP+", "SFP28", "QSFP+", "QSFP28", "RJ45", "BaseT"}),
        ),
    ),
    ComponentCategory.OTHER: (),
})


# ---------------------------------------------------------------------------
# Typed attribute access. JSON numbers may arrive as int or float; bool is
# never a number even though it subclasses int.
# ---------------------------------------------------------------------------


def attr_str(attrs: Mapping[str, Any], key: str) -> str | None:
    v = attrs.get(key)
    return v if isinstance(v, str) else None


def attr_float(attrs: Mapping[str, Any], key: str) -> float | None:
    v = attrs.get(key)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    v = float(v)
    return v if math.isfinite(v) else None


def attr_int(attrs: Mapping[str, Any], key: str) -> int | None:
    v = attr_float(attrs, key)
    return None if v is None else int(v)


def _check_rule(rule: FieldRule, attrs: Mapping[str, Any]) -> None:
    if rule.kind == "str":
        value = attr_str(attrs, rule.name)
        if value is None or (rule.non_empty and value == ""):
            if rule.required:
                raise MissingFieldError(rule.name)
            return
        if rule.choices is not None and value not in rule.choices:
            raise InvalidEnumError(rule.name, value)
        return

    number = attr_int(attrs, rule.name) if rule.kind == "int" else attr_float(attrs, rule.name)
    if number is None:
        if rule.required:
            raise MissingFieldError(rule.name)
        return
    if (rule.low is not None and number < rule.low) or (rule.high is not None and number > rule.high):
        raise OutOfRangeError(rule.name, number, rule.low, rule.high)


def _validate_common(record: AttributeRecord) -> None:
    cond = attr_str(record, "condition")
    if cond is None:
        raise MissingFieldError("condition")
    # Unmapped text is UNKNOWN, which is itself a valid value.
    record["condition"] = normalize_condition(cond).value

    conf = attr_float(record, "confidence")
    if conf is None:
        raise MissingFieldError("confidence")
    if conf < 0.0 or conf > 1.0:
        raise OutOfRangeError("confidence", conf, 0.0, 1.0)

    qty = attr_int(record, "quantity")
    if qty is not None and qty < 1:
        raise OutOfRangeError("quantity", qty, 1)


def validate_extraction(
    category: ComponentCategory | str, attrs: Mapping[str, Any]
) -> AttributeRecord:
    """Validate and normalize ``attrs`` for ``category``; return the normalized copy.

    Raises MissingFieldError / OutOfRangeError / InvalidEnumError naming the field.
    Categories without a schema (``other``, unknown strings) get the common rules only.
    """
    record: AttributeRecord = dict(attrs)
    _validate_common(record)

    try:
        rules = CATEGORY_RULES.get(ComponentCategory(category), ())
    except ValueError:
        rules = ()
    for rule in rules:
        _check_rule(rule, record)
    return record
