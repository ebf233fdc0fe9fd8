"""RAM speed recovery from listing titles (PC module codes and DDRn-NNNN)."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

# PC module bandwidth number -> MHz
PC_MODULE_SPEEDS: Mapping[str, int] = MappingProxyType({
    # DDR3
    "10600": 1333,
    "12800": 1600,
    "14900": 1866,
    # DDR4
    "17000": 2133,
    "19200": 2400,
    "21300": 2666,
    "23400": 2933,
    "25600": 3200,
    # DDR5
    "38400": 4800,
    "44800": 5600,
    "51200": 6400,
})

MIN_SPEED_MHZ = 800
MAX_SPEED_MHZ = 8400

# "PC4-21300", "PC4-21300V", "pc3-12800", "PC421300R"
_PC_MODULE_RE = re.compile(r"\bPC[345]-?(\d{5,6})[A-Z]?\b", re.IGNORECASE)
# "DDR4-2666", "DDR5-4800"
_DDR_SPEED_RE = re.compile(r"\bDDR[345]-(\d{4})\b", re.IGNORECASE)
# Standalone code: optional prefix, bandwidth digits, optional letter suffix
_PC_CODE_RE = re.compile(r"^(?:PC[345]-?)?(\d{5,6})[A-Z]?$")


def pc_module_to_mhz(code: str) -> int | None:
    """Convert a PC module code ("PC4-21300V", "pc4-21300", "21300") to MHz; None on miss."""
    m = _PC_CODE_RE.match(code.strip().upper())
    if not m:
        return None
    return PC_MODULE_SPEEDS.get(m.group(1))


def extract_speed_from_title(title: str) -> int | None:
    """Find a RAM speed in a title: PC module code first, then a DDRn-NNNN designation."""
    m = _PC_MODULE_RE.search(title)
    if m and m.group(1) in PC_MODULE_SPEEDS:
        return PC_MODULE_SPEEDS[m.group(1)]

    m = _DDR_SPEED_RE.search(title)
    if m:
        speed = int(m.group(1))
        if MIN_SPEED_MHZ <= speed <= MAX_SPEED_MHZ:
            return speed
    return None


def _has_speed(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and int(value) != 0


def normalize_ram_speed(title: str, attrs: dict[str, Any]) -> bool:
    """Backfill ``speed_mhz`` from the title when missing, null or zero. Modifies attrs in place.

    Returns True if speed_mhz is set afterwards (already present or recovered).
    Never raises: this is advisory enrichment only.
    """
    if _has_speed(attrs.get("speed_mhz")):
        return True

    mhz = extract_speed_from_title(title or "")
    if mhz is None:
        return False
    attrs["speed_mhz"] = mhz
    return True
