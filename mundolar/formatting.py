from __future__ import annotations

import json
from typing import Any, List


def format_currency(value: Any) -> str:
    """Format a number the es-CO way: dot thousands separator, no decimals.

    >>> format_currency(1500000)
    '1.500.000'
    """
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return "0"
    if numeric != numeric:  # NaN
        return "0"
    return f"{numeric:,.0f}".replace(",", ".")


def format_price(value: Any) -> str:
    return f"${format_currency(value)}"


def parse_image_urls(value: Any) -> List[str]:
    """Normalise the ``image_urls`` column, which may be a list or JSON text."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v]
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return [value] if value.startswith("http") else []
        if isinstance(parsed, list):
            return [str(v) for v in parsed if v]
        return [value] if value.startswith("http") else []
    return []
