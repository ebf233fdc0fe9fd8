"""Product keys: deterministic grouping strings for price-baseline aggregation.

``product_key`` is total. Any category/record pairing yields a key; missing or
wrong-typed values become ``unknown`` (strings) or ``0`` (numbers).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

UNKNOWN = "unknown"

_RPM_TOKENS = {7200: "7k2", 10000: "10k", 15000: "15k"}


def _token(value: Any) -> str:
    if not isinstance(value, str) or value == "":
        return UNKNOWN
    return value.lower().replace(" ", "_")


def _number(attrs: Mapping[str, Any], key: str) -> int:
    v = attrs.get(key)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return 0
    try:
        return int(v)
    except (OverflowError, ValueError):  # inf / nan
        return 0


def _ram_subtype(attrs: Mapping[str, Any]) -> str:
    ecc = attrs.get("ecc")
    if not isinstance(ecc, bool):
        return UNKNOWN
    if not ecc:
        return "non_ecc"
    return "ecc_reg" if attrs.get("registered") is True else "ecc_unbuf"


def _drive_subtype(attrs: Mapping[str, Any]) -> str:
    kind = attrs.get("type")
    if not isinstance(kind, str):
        return UNKNOWN
    if kind.lower() == "ssd":
        return "ssd"
    return _RPM_TOKENS.get(_number(attrs, "rpm"), "hdd")


def product_key(category: Any, attrs: Mapping[str, Any] | None) -> str:
    """Build the grouping key for a validated record. Never raises."""
    attrs = attrs if isinstance(attrs, Mapping) else {}
    cat = str(getattr(category, "value", category))

    if cat == "ram":
        return (
            f"ram:{_token(attrs.get('generation'))}:{_ram_subtype(attrs)}"
            f":{_number(attrs, 'capacity_gb')}gb:{_number(attrs, 'speed_mhz')}"
        )
    if cat == "drive":
        return (
            f"drive:{_token(attrs.get('interface'))}:{_token(attrs.get('form_factor'))}"
            f":{_token(attrs.get('capacity'))}:{_drive_subtype(attrs)}"
        )
    if cat == "server":
        return (
            f"server:{_token(attrs.get('manufacturer'))}:{_token(attrs.get('model'))}"
            f":{_token(attrs.get('drive_form_factor'))}"
        )
    if cat == "cpu":
        return (
            f"cpu:{_token(attrs.get('manufacturer'))}:{_token(attrs.get('family'))}"
            f":{_token(attrs.get('model'))}"
        )
    if cat == "nic":
        return (
            f"nic:{_token(attrs.get('speed'))}:{_number(attrs, 'port_count')}p"
            f":{_token(attrs.get('port_type'))}"
        )
    return f"other:{cat}"
