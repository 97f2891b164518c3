"""
Campaign builder.

Expands templated Campaign -> Ad Group -> Ad -> Keyword hierarchies against
tabular data and validates them against advertising platform constraints.
"""
from .patterns.engine import extract_variables, interpolate_pattern
from .hierarchy.resolver import resolve, resolve_config
from .keywords.combinator import KeywordCombinator, generate_combinations
from .validation.engine import Validator, validate_hierarchy

__version__ = "1.0.0"

__all__ = [
    'extract_variables',
    'interpolate_pattern',
    'resolve',
    'resolve_config',
    'KeywordCombinator',
    'generate_combinations',
    'Validator',
    'validate_hierarchy'
]
