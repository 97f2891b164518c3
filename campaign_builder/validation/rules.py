"""
Validation rules for ad patterns.

Each rule returns a list of ValidationItem and never raises. Rules are
independent of each other; the engine decides which ones apply to a field.
"""

import re
from typing import Any, Collection, List, Mapping, Optional, Sequence
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError

from campaign_builder.hierarchy.models import AdField
from campaign_builder.patterns.engine import (
    TOKEN_PATTERN,
    has_variables,
    interpolate_pattern,
    is_variable_pattern,
    unique_variables
)
from campaign_builder.validation.models import IssueType, Severity, ValidationItem

URL_PLACEHOLDER = "placeholder"

_http_url = TypeAdapter(HttpUrl)
_whitespace = re.compile(r"\s")


class UrlValidation(BaseModel):
    """Outcome of a URL check."""
    valid: bool = True
    errors: List[str] = Field(default_factory=list)


def _item(
    field: str,
    message: str,
    issue_type: IssueType,
    ad_group_index: Optional[int],
    ad_index: Optional[int]
) -> ValidationItem:
    return ValidationItem(
        field=field,
        message=message,
        step="hierarchy",
        ad_group_index=ad_group_index,
        ad_index=ad_index,
        severity=Severity.ERROR,
        issue_type=issue_type
    )


def check_variable_references(
    pattern: Optional[str],
    field: str,
    column_names: Collection[str],
    ad_group_index: Optional[int] = None,
    ad_index: Optional[int] = None
) -> List[ValidationItem]:
    """
    Report variables that are not columns of the data source.

    Args:
        pattern: Pattern to check
        field: Field name reported on the items
        column_names: Lower-cased column names of the data source
        ad_group_index: Owning ad group index
        ad_index: Owning ad index

    Returns:
        List[ValidationItem]: One item per unknown variable
    """
    return [
        _item(
            field,
            f'Variable "{{{name}}}" not found in data source columns',
            IssueType.MISSING_VARIABLE,
            ad_group_index,
            ad_index
        )
        for name in unique_variables(pattern)
        if name.lower() not in column_names
    ]


def check_static_length(
    pattern: Optional[str],
    field: AdField,
    limit: int,
    ad_group_index: Optional[int] = None,
    ad_index: Optional[int] = None
) -> List[ValidationItem]:
    """Check the raw pattern length; bare ``{variable}`` patterns are exempt."""
    if not pattern or is_variable_pattern(pattern) or len(pattern) <= limit:
        return []
    return [_item(
        field.value,
        f"{field.label} exceeds {limit} character limit ({len(pattern)}/{limit})",
        IssueType.CHARACTER_LIMIT_EXCEEDED,
        ad_group_index,
        ad_index
    )]


def count_overflowing_rows(
    pattern: str,
    limit: int,
    sample_data: Sequence[Mapping[str, Any]]
) -> int:
    return sum(
        1 for row in sample_data
        if len(interpolate_pattern(pattern, row or {})) > limit
    )


def check_interpolated_length(
    pattern: Optional[str],
    field: AdField,
    limit: int,
    sample_data: Sequence[Mapping[str, Any]],
    ad_group_index: Optional[int] = None,
    ad_index: Optional[int] = None
) -> List[ValidationItem]:
    """
    Check interpolated lengths against the sample rows.

    Reports a single item counting the overflowing rows.
    """
    if not pattern or not sample_data or not has_variables(pattern):
        return []
    overflowing = count_overflowing_rows(pattern, limit, sample_data)
    if not overflowing:
        return []
    rows = "row" if overflowing == 1 else "rows"
    return [_item(
        field.value,
        f"{overflowing} {rows} exceed {field.label[0].lower()}{field.label[1:]} limit ({limit} chars)",
        IssueType.CHARACTER_LIMIT_EXCEEDED,
        ad_group_index,
        ad_index
    )]


def validate_url(url: Optional[str]) -> UrlValidation:
    """
    Validate a final (landing page) URL.

    Empty values and bare variable references are valid. Anything else must
    use HTTPS and parse as a URL once its ``{variables}`` are replaced.
    """
    if not url or not url.strip() or is_variable_pattern(url):
        return UrlValidation()

    candidate = TOKEN_PATTERN.sub(URL_PLACEHOLDER, url.strip())
    lowered = candidate.lower()

    if lowered.startswith("http://"):
        return UrlValidation(valid=False, errors=["URL must use HTTPS protocol"])
    if not lowered.startswith("https://"):
        return UrlValidation(valid=False, errors=["URL must start with https://"])
    if _whitespace.search(candidate):
        return UrlValidation(valid=False, errors=["URL must not contain spaces"])

    try:
        _http_url.validate_python(candidate)
    except ValidationError:
        return UrlValidation(valid=False, errors=["Invalid URL format"])
    return UrlValidation()


def validate_display_url(url: Optional[str], limit: int) -> UrlValidation:
    """Validate a display URL: no protocol requirement, no spaces, within ``limit``."""
    if not url or not url.strip():
        return UrlValidation()

    errors = []
    if len(url) > limit:
        errors.append(f"Display URL exceeds {limit} character limit ({len(url)}/{limit})")
    if _whitespace.search(url.strip()):
        errors.append("Display URL must not contain spaces")
    return UrlValidation(valid=not errors, errors=errors)


def check_final_url(
    pattern: Optional[str],
    ad_group_index: Optional[int] = None,
    ad_index: Optional[int] = None
) -> List[ValidationItem]:
    result = validate_url(pattern)
    return [
        _item(AdField.FINAL_URL.value, error, IssueType.INVALID_URL_FORMAT, ad_group_index, ad_index)
        for error in result.errors
    ]


def check_display_url(
    pattern: Optional[str],
    limit: int,
    ad_group_index: Optional[int] = None,
    ad_index: Optional[int] = None
) -> List[ValidationItem]:
    if not pattern or is_variable_pattern(pattern):
        return []
    result = validate_display_url(pattern, limit)
    return [
        _item(
            AdField.DISPLAY_URL.value,
            error,
            IssueType.CHARACTER_LIMIT_EXCEEDED if "exceeds" in error else IssueType.INVALID_URL_FORMAT,
            ad_group_index,
            ad_index
        )
        for error in result.errors
    ]
