"""CSV value normalization — handles BOM, trailing spaces, list cells."""

from __future__ import annotations

import re

_TRUE = {"1", "true", "yes", "y", "on", "是"}
_FALSE = {"0", "false", "no", "n", "off", "否"}


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Removes BOM characters (\\ufeff)
    - Replaces runs of whitespace with a single underscore
    - Lowercases and drops anything that is not a word character
    """
    name = name.replace("\ufeff", "").strip()
    name = re.sub(r"[\s\u00a0]+", "_", name)
    name = name.lower()
    return re.sub(r"[^\w]", "", name, flags=re.UNICODE)


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def parse_list(raw: str | None) -> list[str]:
    """Split 'bolts, nuts; washers' into ['bolts', 'nuts', 'washers'] (order kept)."""
    if not raw:
        return []
    seen: dict[str, None] = {}
    for part in re.split(r"[,;|]+", raw):
        part = part.strip()
        if part:
            seen.setdefault(part, None)
    return list(seen)


def parse_capabilities(raw: str | None, default_level: int = 1) -> dict[str, int]:
    """Parse 'bolts:4, nuts' into {'bolts': 4, 'nuts': default_level}."""
    capabilities: dict[str, int] = {}
    for item in parse_list(raw):
        category, _, level = item.partition(":")
        category = category.strip()
        if not category:
            continue
        capabilities[category] = parse_int(level, default=default_level)
    return capabilities


def parse_bool(raw: str | None, default: bool) -> bool:
    value = (clean_string(raw) or "").lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return default


def parse_int(raw: str | None, default: int | None = None) -> int | None:
    value = clean_string(raw)
    if value is None:
        return default
    try:
        # handle "4", "4.0"
        return int(float(value.replace(",", ".")))
    except (ValueError, OverflowError):
        return default
