"""
Bucketing of validation items for the summary panel.

Items are sorted by the text of their message, not by the rule that produced
them, so items supplied by callers (e.g. "Bid strategy is required") are
bucketed the same way as engine output.
"""

from typing import Dict, Iterable, List, Optional

from campaign_builder.validation.models import (
    FieldValidation,
    ValidationCategory,
    ValidationItem
)


def category_of(message: str) -> str:
    """Name of the ValidationCategory bucket a message belongs to."""
    if "character" in message or "exceed" in message:
        return "character_limits"
    if "URL" in message or "HTTPS" in message:
        return "url_format"
    if "required" in message:
        return "required_fields"
    if "Variable" in message or "not found" in message:
        return "variable_references"
    return "character_limits"


def categorize(
    errors: Iterable[ValidationItem],
    warnings: Optional[Iterable[ValidationItem]] = None
) -> ValidationCategory:
    """
    Sort errors into the four summary buckets.

    Args:
        errors: Error items, from the engine or from callers
        warnings: Warning items, passed through unchanged

    Returns:
        ValidationCategory: Bucketed items
    """
    buckets: Dict[str, List[ValidationItem]] = {
        "character_limits": [],
        "url_format": [],
        "required_fields": [],
        "variable_references": [],
    }
    for item in errors:
        buckets[category_of(item.message)].append(item)
    return ValidationCategory(warnings=list(warnings or []), **buckets)


def errors_by_field(errors: Iterable[ValidationItem]) -> Dict[str, List[ValidationItem]]:
    """Group items by ``field-adGroupIndex-adIndex``."""
    grouped: Dict[str, List[ValidationItem]] = {}
    for item in errors:
        grouped.setdefault(item.field_key, []).append(item)
    return grouped


def field_validation(
    errors: Iterable[ValidationItem],
    warnings: Iterable[ValidationItem],
    field: str,
    ad_group_index: int,
    ad_index: int
) -> FieldValidation:
    """Validation state of one ad field."""
    field_errors = errors_by_field(errors).get(f"{field}-{ad_group_index}-{ad_index}", [])
    field_warnings = [
        item for item in warnings
        if item.field == field
        and item.ad_group_index == ad_group_index
        and item.ad_index == ad_index
    ]
    return FieldValidation(
        has_error=bool(field_errors),
        has_warning=bool(field_warnings),
        errors=[item.message for item in field_errors],
        warnings=[item.message for item in field_warnings]
    )
