"""
Value filters for pattern variables.

Filters are written after the variable name, separated by pipes:
``{brand|uppercase}``, ``{desc|truncate:30}``, ``{title|lowercase|slug}``.
Arguments follow the filter name separated by colons.
"""

import logging
import re
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

FilterFn = Callable[..., str]

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def _parse_number(value: str):
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _capitalize(value: str) -> str:
    return value[:1].upper() + value[1:].lower()


def _truncate(value: str, length: str = "", suffix: str = "...") -> str:
    try:
        max_len = int(length)
    except ValueError:
        return value
    if len(value) <= max_len:
        return value
    return value[:max_len].rstrip() + suffix


def _slug(value: str) -> str:
    slug = re.sub(r"[^\w\s-]", "", value.lower())
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug).strip()


def _currency(value: str, code: str = "USD") -> str:
    num = _parse_number(value)
    if num is None:
        return value
    code = code.upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{code} {num:,.2f}"
    if num < 0:
        return f"-{symbol}{abs(num):,.2f}"
    return f"{symbol}{num:,.2f}"


def _number(value: str, decimals: str = "") -> str:
    num = _parse_number(value)
    if num is None:
        return value
    if decimals.isdigit():
        return f"{num:,.{int(decimals)}f}"
    if num.is_integer():
        return f"{int(num):,}"
    # grouped, up to three fraction digits
    return f"{num:,.3f}".rstrip("0").rstrip(".")


def _percent(value: str) -> str:
    num = _parse_number(value)
    if num is None:
        return value
    return f"{num * 100:.1f}%"


def _replace(value: str, search: str = "", replacement: str = "") -> str:
    if not search:
        return value
    return value.replace(search, replacement)


def _default(value: str, fallback: str = "") -> str:
    return fallback if value == "" else value


FILTERS: Dict[str, FilterFn] = {
    "uppercase": lambda value: value.upper(),
    "lowercase": lambda value: value.lower(),
    "capitalize": _capitalize,
    "titlecase": lambda value: " ".join(_capitalize(word) for word in value.split(" ")),
    "trim": lambda value: value.strip(),
    "truncate": _truncate,
    "slug": _slug,
    "currency": _currency,
    "number": _number,
    "percent": _percent,
    "replace": _replace,
    "default": _default,
}


def is_known_filter(name: str) -> bool:
    """Return True if ``name`` is a registered filter."""
    return name in FILTERS


def split_filter(spec: str) -> List[str]:
    """Split ``truncate:20:...`` into ``["truncate", "20", "..."]``."""
    parts = spec.split(":")
    parts[0] = parts[0].strip()
    return parts


def apply_filters(value: str, filter_chain: str) -> str:
    """
    Apply a pipe-separated filter chain to a value.

    Unknown filter names are skipped, so a chain that starts with a fallback
    variable name still applies the filters that follow it.

    Args:
        value: Value to transform
        filter_chain: e.g. ``"uppercase"`` or ``"trim|truncate:20"``

    Returns:
        str: Transformed value
    """
    result = value
    for spec in filter_chain.split("|"):
        name, *args = split_filter(spec)
        filter_fn = FILTERS.get(name)
        if filter_fn is None:
            continue
        try:
            result = filter_fn(result, *args)
        except TypeError:
            # too many arguments for this filter
            logger.debug(f"Ignoring filter with bad arguments: {spec!r}")
    return result
