"""
Lenient parsing of paging and numeric query parameters.

Listing endpoints accept ``limit`` / ``offset`` as raw strings so that a
missing or garbled value falls back to a default instead of failing the
request.
"""
import math
from typing import Optional, Tuple

# Largest OFFSET a 64-bit SQL integer can carry
MAX_OFFSET = 2 ** 63 - 1


def parse_int(value, default: int) -> int:
    """Parse an integer query value, returning ``default`` when absent or non-numeric"""
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def parse_float(value) -> Optional[float]:
    """Parse a finite float, returning None when absent, non-numeric, NaN or infinite"""
    if value is None:
        return None
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def normalize_limit(limit: int, default: int, maximum: int) -> int:
    """Zero or negative limits mean "use the default"; large ones are capped"""
    if limit <= 0:
        return default
    return min(limit, maximum)


def normalize_offset(offset: int) -> int:
    return min(max(offset, 0), MAX_OFFSET)


def parse_page(limit, offset, default_limit: int, max_limit: int) -> Tuple[int, int]:
    """Return a sanitized ``(limit, offset)`` pair"""
    return (
        normalize_limit(parse_int(limit, default_limit), default_limit, max_limit),
        normalize_offset(parse_int(offset, 0)),
    )
