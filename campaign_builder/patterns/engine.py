"""
Pattern engine.

Patterns are plain strings containing ``{variable}`` placeholders that are
resolved against a single data row. Placeholders may carry a filter chain
(``{brand|uppercase}``) or a fallback variable (``{sale_price|regular_price}``).

Unresolved placeholders are left in the output verbatim.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from campaign_builder.patterns.filters import apply_filters, is_known_filter, split_filter

logger = logging.getLogger(__name__)

# {name}, {name|filter}, {name|filter:arg|filter}, {name|fallback}
VARIABLE_PATTERN = re.compile(r"\{([a-zA-Z_][a-zA-Z0-9_]*)(?:\|([^}]*))?\}")

# Any brace-delimited token, used for cursor-level editing
TOKEN_PATTERN = re.compile(r"\{[^}]+\}")

BARE_VARIABLE_PATTERN = re.compile(r"^\{[^}]+\}$")

_MISSING = object()


@dataclass(frozen=True)
class VariableSpan:
    """Location of a ``{...}`` token inside a string; ``end`` is exclusive."""
    start: int
    end: int
    content: str

    @property
    def name(self) -> str:
        return self.content[1:-1].split("|")[0].strip()


def to_text(value: Any) -> str:
    """
    Coerce a row value to the text inserted into a pattern.

    ``None`` and NaN become an empty string, booleans are lower-cased and
    integral floats lose their trailing ``.0``. Never raises.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    try:
        return str(value)
    except Exception as e:
        logger.warning(f"Could not convert {type(value).__name__} value to text: {e}")
        return ""


def _is_empty(value: Any) -> bool:
    return value is _MISSING or value is None or (isinstance(value, str) and value == "")


def extract_variables(pattern: Optional[str]) -> List[str]:
    """
    Extract variable names from a pattern, in order of appearance.

    Duplicates are preserved: ``"{a} {b} {a}"`` gives ``["a", "b", "a"]``.
    Filters and fallbacks are not part of the name: ``"{brand|uppercase}"``
    gives ``["brand"]``.
    """
    if not pattern:
        return []
    return [match.group(1) for match in VARIABLE_PATTERN.finditer(pattern)]


def unique_variables(pattern: Optional[str]) -> List[str]:
    """Like :func:`extract_variables` but keeps only the first occurrence."""
    return list(dict.fromkeys(extract_variables(pattern)))


def interpolate_pattern(pattern: Optional[str], row: Optional[Mapping[str, Any]]) -> str:
    """
    Interpolate a pattern against a data row.

    Each placeholder is replaced by the row value for its (case-sensitive)
    name. When the name is not a key of the row the placeholder is kept as
    is. A fallback variable is consulted when the primary value is missing
    or empty.

    Args:
        pattern: Pattern string with ``{variable}`` placeholders
        row: Mapping of column name to value

    Returns:
        str: Interpolated string
    """
    if not pattern:
        return ""
    row = row or {}

    def _substitute(match: "re.Match[str]") -> str:
        name, chain = match.group(1), match.group(2)
        value = row.get(name, _MISSING)

        if _is_empty(value) and chain:
            first = split_filter(chain.split("|")[0])[0]
            if first and not is_known_filter(first):
                fallback = row.get(first, _MISSING)
                if not _is_empty(fallback):
                    return apply_filters(to_text(fallback), chain)

        if value is _MISSING:
            return match.group(0)

        text = to_text(value)
        if chain:
            text = apply_filters(text, chain)
        return text

    return VARIABLE_PATTERN.sub(_substitute, pattern)


def is_variable_pattern(value: Optional[str]) -> bool:
    """Return True when the whole value is a single ``{...}`` reference."""
    if not value:
        return False
    return BARE_VARIABLE_PATTERN.match(value.strip()) is not None


def has_variables(pattern: Optional[str]) -> bool:
    return bool(pattern) and VARIABLE_PATTERN.search(pattern) is not None


def find_variables(text: Optional[str]) -> List[VariableSpan]:
    """Find every ``{...}`` token in ``text`` with its position."""
    if not text:
        return []
    return [
        VariableSpan(start=match.start(), end=match.end(), content=match.group(0))
        for match in TOKEN_PATTERN.finditer(text)
    ]
