"""
Keyword generation from prefix/core/suffix term lists.
"""
from .combinator import (
    CombinationMode,
    KeywordCombinator,
    KeywordStats,
    parse_terms,
    generate_combinations,
    applicable_modes,
    is_mode_applicable
)

__all__ = [
    'CombinationMode',
    'KeywordCombinator',
    'KeywordStats',
    'parse_terms',
    'generate_combinations',
    'applicable_modes',
    'is_mode_applicable'
]
