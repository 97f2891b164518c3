"""
Pattern package for variable extraction, interpolation and atomic editing.
"""
from .engine import (
    VariableSpan,
    extract_variables,
    unique_variables,
    interpolate_pattern,
    is_variable_pattern,
    has_variables,
    find_variables,
    to_text
)
from .filters import FILTERS, apply_filters, is_known_filter
from .editing import (
    KeyIntent,
    EditResult,
    variable_at,
    variable_ending_at,
    variable_starting_at,
    apply_key_intent,
    autocomplete_query,
    filter_columns,
    insert_variable
)

__all__ = [
    'VariableSpan',
    'extract_variables',
    'unique_variables',
    'interpolate_pattern',
    'is_variable_pattern',
    'has_variables',
    'find_variables',
    'to_text',
    'FILTERS',
    'apply_filters',
    'is_known_filter',
    'KeyIntent',
    'EditResult',
    'variable_at',
    'variable_ending_at',
    'variable_starting_at',
    'apply_key_intent',
    'autocomplete_query',
    'filter_columns',
    'insert_variable'
]
