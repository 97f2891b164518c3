"""
Validation models.

Validation never raises: every issue becomes a ValidationItem collected into
a ValidationResult, and callers decide how to present it.
"""

from typing import List, Optional
from enum import Enum
from pydantic import ConfigDict, Field

from campaign_builder.hierarchy.models import CamelModel


class Severity(str, Enum):
    """Severity levels for validation items."""
    ERROR = "error"
    WARNING = "warning"


class IssueType(str, Enum):
    """Kinds of issues the validation rules produce."""
    MISSING_VARIABLE = "missing_variable"
    CHARACTER_LIMIT_EXCEEDED = "character_limit_exceeded"
    INVALID_URL_FORMAT = "invalid_url_format"
    REQUIRED_FIELD_MISSING = "required_field_missing"


class Platform(str, Enum):
    """Advertising platforms with known limits. Other names are accepted as plain strings."""
    GOOGLE = "google"
    REDDIT = "reddit"
    FACEBOOK = "facebook"


class CounterState(str, Enum):
    """State of a character counter for a field."""
    NORMAL = "normal"
    WARNING = "warning"
    DANGER = "danger"
    OVER = "over"


class ValidationItem(CamelModel):
    """A single validation message, scoped to an ad group and ad when known."""
    model_config = ConfigDict(frozen=True)

    field: str
    message: str
    step: str = "hierarchy"
    ad_group_index: Optional[int] = None
    ad_index: Optional[int] = None
    severity: Severity = Severity.ERROR
    issue_type: Optional[IssueType] = None

    @property
    def field_key(self) -> str:
        """Lookup key combining the field with its ad group and ad indices."""
        ad_group = "" if self.ad_group_index is None else self.ad_group_index
        ad = "" if self.ad_index is None else self.ad_index
        return f"{self.field}-{ad_group}-{ad}"


class ValidationCategory(CamelModel):
    """Errors bucketed for the validation summary."""
    character_limits: List[ValidationItem] = Field(default_factory=list)
    url_format: List[ValidationItem] = Field(default_factory=list)
    required_fields: List[ValidationItem] = Field(default_factory=list)
    variable_references: List[ValidationItem] = Field(default_factory=list)
    warnings: List[ValidationItem] = Field(default_factory=list)


class FieldValidation(CamelModel):
    """Validation state of one input field."""
    has_error: bool = False
    has_warning: bool = False
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ValidationResult(CamelModel):
    """Outcome of one validation run."""
    errors: List[ValidationItem] = Field(default_factory=list)
    warnings: List[ValidationItem] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class CharacterLimitWarning(CamelModel):
    """One interpolated value that overflows its platform limit."""
    field: str
    value: str
    length: int
    limit: int
    overflow: int
    row_index: Optional[int] = None


class CharacterLimitSummary(CamelModel):
    """Per-platform overflow counts across all sample rows."""
    platform: str
    headline_overflows: int = 0
    description_overflows: int = 0
    display_url_overflows: int = 0
    total_overflows: int = 0
    warnings: List[CharacterLimitWarning] = Field(default_factory=list)
