"""Listing condition normalization: marketplace / model phrasing -> Condition."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from hwextract.schemas.models import Condition

CONDITION_SYNONYMS: Mapping[str, Condition] = MappingProxyType({
    # canonical values map to themselves
    "new": Condition.NEW,
    "like_new": Condition.LIKE_NEW,
    "used_working": Condition.USED_WORKING,
    "for_parts": Condition.FOR_PARTS,
    "unknown": Condition.UNKNOWN,
    # eBay condition names and common model paraphrases
    "brand new": Condition.NEW,
    "factory sealed": Condition.NEW,
    "new other": Condition.NEW,
    "new (other)": Condition.NEW,
    "open box": Condition.LIKE_NEW,
    "manufacturer refurbished": Condition.LIKE_NEW,
    "certified refurbished": Condition.LIKE_NEW,
    "used": Condition.USED_WORKING,
    "pre-owned": Condition.USED_WORKING,
    "seller refurbished": Condition.USED_WORKING,
    "pulled from working": Condition.USED_WORKING,
    "tested working": Condition.USED_WORKING,
    "for parts": Condition.FOR_PARTS,
    "for parts or not working": Condition.FOR_PARTS,
    "not working": Condition.FOR_PARTS,
    "parts only": Condition.FOR_PARTS,
    "as-is": Condition.FOR_PARTS,
    "as is": Condition.FOR_PARTS,
})


def normalize_condition(raw: str | None) -> Condition:
    """Map raw condition text to a Condition; anything unrecognised is UNKNOWN."""
    key = (raw or "").strip().lower()
    if not key:
        return Condition.UNKNOWN
    return CONDITION_SYNONYMS.get(key, Condition.UNKNOWN)
