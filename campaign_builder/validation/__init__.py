"""
Validation package: platform limits, rules, categorization and the cached validator.
"""
from .models import (
    Severity,
    IssueType,
    Platform,
    CounterState,
    ValidationItem,
    ValidationCategory,
    FieldValidation,
    ValidationResult,
    CharacterLimitWarning,
    CharacterLimitSummary
)
from .platforms import (
    PlatformLimits,
    PLATFORM_LIMITS,
    get_field_limit,
    most_restrictive_limit,
    register_platform,
    counter_state
)
from .rules import validate_url, validate_display_url, UrlValidation
from .categorizer import categorize, errors_by_field, field_validation
from .engine import Validator, validate_hierarchy, check_character_limits, build_cache_key

__all__ = [
    'Severity',
    'IssueType',
    'Platform',
    'CounterState',
    'ValidationItem',
    'ValidationCategory',
    'FieldValidation',
    'ValidationResult',
    'CharacterLimitWarning',
    'CharacterLimitSummary',
    'PlatformLimits',
    'PLATFORM_LIMITS',
    'get_field_limit',
    'most_restrictive_limit',
    'register_platform',
    'counter_state',
    'validate_url',
    'validate_display_url',
    'UrlValidation',
    'categorize',
    'errors_by_field',
    'field_validation',
    'Validator',
    'validate_hierarchy',
    'check_character_limits',
    'build_cache_key'
]
