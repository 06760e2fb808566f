"""Shared utilities."""
import re
from datetime import datetime, timezone
from typing import Any

_NON_NUMERIC = re.compile(r"[^\d.]")


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_price(raw: Any) -> float | None:
    """Convert a store price ("$1,299.99", "₹ 54,999", 79) to a float; None if absent."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    cleaned = _NON_NUMERIC.sub("", str(raw))
    # "Rs.1,299" leaves a leading dot behind
    cleaned = cleaned.strip(".")
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def first_present(item: dict[str, Any], *paths: str) -> Any:
    """First truthy value among dotted paths, e.g. "offers.0.price".

    Numeric path segments index into lists.
    """
    for path in paths:
        value: Any = item
        for part in path.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            elif isinstance(value, list) and part.isdigit() and int(part) < len(value):
                value = value[int(part)]
            else:
                value = None
            if value is None:
                break
        if value:
            return value
    return None
