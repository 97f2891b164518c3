"""
Validation engine.

``validate_hierarchy`` runs every rule over a hierarchy configuration and is
a pure function. ``Validator`` wraps it for interactive use: results are
cached on a serialization of the inputs and runs are debounced, with a newer
request cancelling any pending one.
"""

import asyncio
import json
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from campaign_builder.config import validation_config
from campaign_builder.errors import ConfigurationError
from campaign_builder.hierarchy.models import AdField, DataSourceColumn, HierarchyConfig
from campaign_builder.patterns.engine import interpolate_pattern
from campaign_builder.utils.cache import ResultStore, digest
from campaign_builder.utils.logging import setup_logger
from campaign_builder.validation.categorizer import categorize, errors_by_field, field_validation
from campaign_builder.validation.models import (
    CharacterLimitSummary,
    CharacterLimitWarning,
    FieldValidation,
    ValidationCategory,
    ValidationItem,
    ValidationResult
)
from campaign_builder.validation.platforms import (
    LIMITED_FIELDS,
    PlatformName,
    get_field_limit,
    most_restrictive_limit,
    platform_key
)
from campaign_builder.validation.rules import (
    check_display_url,
    check_final_url,
    check_interpolated_length,
    check_static_length,
    check_variable_references
)

logger = setup_logger(__name__)

Rows = Sequence[Mapping[str, Any]]
Evaluator = Callable[
    [HierarchyConfig, Rows, Sequence[PlatformName], Sequence[DataSourceColumn]],
    ValidationResult
]


def validate_hierarchy(
    hierarchy_config: HierarchyConfig,
    sample_data: Rows,
    selected_platforms: Sequence[PlatformName],
    available_columns: Sequence[DataSourceColumn]
) -> ValidationResult:
    """
    Validate every pattern of a hierarchy configuration.

    Args:
        hierarchy_config: Ad group templates
        sample_data: Sample rows used for interpolated length checks
        selected_platforms: Platforms whose limits apply
        available_columns: Data source schema

    Returns:
        ValidationResult: Errors and warnings, in rule order
    """
    errors: List[ValidationItem] = []
    warnings: List[ValidationItem] = []
    column_names = {column.name.lower() for column in available_columns}
    sample_data = list(sample_data or [])
    limits = {
        field: most_restrictive_limit(field, selected_platforms)
        for field in LIMITED_FIELDS
    }

    for ad_group_index, ad_group in enumerate(hierarchy_config.ad_groups):
        errors.extend(check_variable_references(
            ad_group.name_pattern, "namePattern", column_names, ad_group_index
        ))

        for ad_index, ad in enumerate(ad_group.ads):
            for field in AdField:
                pattern = ad.pattern(field)
                if not pattern:
                    continue

                errors.extend(check_variable_references(
                    pattern, field.value, column_names, ad_group_index, ad_index
                ))

                if field == AdField.FINAL_URL:
                    errors.extend(check_final_url(pattern, ad_group_index, ad_index))
                    continue

                limit = limits[field]
                if field == AdField.DISPLAY_URL:
                    errors.extend(check_display_url(pattern, limit, ad_group_index, ad_index))
                else:
                    errors.extend(check_static_length(pattern, field, limit, ad_group_index, ad_index))
                errors.extend(check_interpolated_length(
                    pattern, field, limit, sample_data, ad_group_index, ad_index
                ))

    logger.debug(
        f"Validated {len(hierarchy_config.ad_groups)} ad groups against "
        f"{len(sample_data)} rows: {len(errors)} errors"
    )
    return ValidationResult(errors=errors, warnings=warnings)


def check_character_limits(
    sample_data: Rows,
    hierarchy_config: HierarchyConfig,
    platform: PlatformName
) -> CharacterLimitSummary:
    """
    Count interpolated values that overflow ``platform``'s limits.

    Unlike the validation rules this reports every overflowing value with its
    row index, for a per-platform breakdown.
    """
    summary = CharacterLimitSummary(platform=platform_key(platform))
    counts: Dict[AdField, int] = {field: 0 for field in LIMITED_FIELDS}

    for row_index, row in enumerate(sample_data or []):
        if not row:
            continue
        for ad_group in hierarchy_config.ad_groups:
            for ad in ad_group.ads:
                for field in LIMITED_FIELDS:
                    limit = get_field_limit(platform, field)
                    pattern = ad.pattern(field)
                    if not limit or (field == AdField.DISPLAY_URL and not pattern):
                        continue
                    value = interpolate_pattern(pattern, row)
                    if len(value) > limit:
                        counts[field] += 1
                        summary.warnings.append(CharacterLimitWarning(
                            field=field.value,
                            value=value,
                            length=len(value),
                            limit=limit,
                            overflow=len(value) - limit,
                            row_index=row_index
                        ))

    summary.headline_overflows = counts[AdField.HEADLINE]
    summary.description_overflows = counts[AdField.DESCRIPTION]
    summary.display_url_overflows = counts[AdField.DISPLAY_URL]
    summary.total_overflows = sum(counts.values())
    return summary


def build_cache_key(
    hierarchy_config: HierarchyConfig,
    sample_data: Rows,
    selected_platforms: Sequence[PlatformName],
    available_columns: Sequence[DataSourceColumn]
) -> str:
    """
    Serialize the inputs that decide whether a cached result is reusable.

    Only the number of rows and columns take part, not their content.
    """
    return json.dumps({
        "hierarchyConfig": hierarchy_config.model_dump(mode="json", by_alias=True),
        "sampleDataLength": len(sample_data or []),
        "selectedPlatforms": [
            platform.value if isinstance(platform, Enum) else platform
            for platform in selected_platforms or []
        ],
        "columnsCount": len(available_columns or []),
    })


class Validator:
    """
    Cached, debounced validation for one editing session.

    ``validate`` runs synchronously and reuses the previous result when the
    cache key is unchanged. ``schedule`` runs ``validate`` after the debounce
    delay on the running event loop; scheduling again before the delay
    elapses cancels the earlier run.
    """

    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        debounce_seconds: Optional[float] = None,
        store: Optional[ResultStore] = None,
        on_result: Optional[Callable[[ValidationResult], None]] = None
    ):
        """
        Initialize the validator.

        Args:
            evaluator: Rule evaluator, ``validate_hierarchy`` by default
            debounce_seconds: Delay before a scheduled run (settings value when omitted)
            store: Optional shared result store consulted on a cache miss
            on_result: Called with every applied result
        """
        if debounce_seconds is None:
            debounce_seconds = validation_config.debounce_seconds
        if debounce_seconds < 0:
            raise ConfigurationError(
                "Debounce delay cannot be negative",
                {"debounce_seconds": debounce_seconds}
            )
        self.evaluator = evaluator or validate_hierarchy
        self.debounce_seconds = debounce_seconds
        self.store = store
        self.on_result = on_result

        self._cache_key: Optional[str] = None
        self._cached: Optional[ValidationResult] = None
        self._pending: Optional["asyncio.Task[ValidationResult]"] = None
        self.result = ValidationResult()
        self.is_validating = False

    def validate(
        self,
        hierarchy_config: Optional[HierarchyConfig],
        sample_data: Rows,
        selected_platforms: Sequence[PlatformName],
        available_columns: Sequence[DataSourceColumn]
    ) -> ValidationResult:
        """Validate now, returning the cached result when inputs are unchanged."""
        if hierarchy_config is None:
            return ValidationResult()

        key = build_cache_key(hierarchy_config, sample_data, selected_platforms, available_columns)
        if key == self._cache_key and self._cached is not None:
            logger.debug("Validation cache hit")
            return self._cached

        result = self._from_store(key)
        if result is None:
            result = self.evaluator(hierarchy_config, sample_data, selected_platforms, available_columns)
            if self.store is not None:
                self.store.set_json(digest(key), result.model_dump(mode="json"))

        self._cache_key = key
        self._cached = result
        return result

    def _from_store(self, key: str) -> Optional[ValidationResult]:
        if self.store is None:
            return None
        payload = self.store.get_json(digest(key))
        if payload is None:
            return None
        logger.debug("Validation result loaded from shared store")
        return ValidationResult.model_validate(payload)

    def schedule(
        self,
        hierarchy_config: Optional[HierarchyConfig],
        sample_data: Rows,
        selected_platforms: Sequence[PlatformName],
        available_columns: Sequence[DataSourceColumn]
    ) -> "asyncio.Task[ValidationResult]":
        """
        Schedule a debounced run. Must be called from a running event loop.

        Returns:
            asyncio.Task: The pending run; it is cancelled if a newer run is scheduled
        """
        self.cancel()
        self.is_validating = True
        self._pending = asyncio.get_running_loop().create_task(self._run_after_delay(
            hierarchy_config,
            list(sample_data or []),
            list(selected_platforms or []),
            list(available_columns or [])
        ))
        return self._pending

    async def _run_after_delay(
        self,
        hierarchy_config: Optional[HierarchyConfig],
        sample_data: Rows,
        selected_platforms: Sequence[PlatformName],
        available_columns: Sequence[DataSourceColumn]
    ) -> ValidationResult:
        try:
            await asyncio.sleep(self.debounce_seconds)
            result = self.validate(hierarchy_config, sample_data, selected_platforms, available_columns)
            self.result = result
        finally:
            # a superseded run must not clear the state of its replacement
            if self._pending is asyncio.current_task():
                self._pending = None
                self.is_validating = False
        if self.on_result is not None:
            self.on_result(result)
        return result

    def cancel(self) -> None:
        """Cancel the pending run, if any."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self.is_validating = False

    async def wait(self) -> ValidationResult:
        """Wait until no run is pending and return the applied result."""
        while self._pending is not None:
            pending = self._pending
            try:
                await pending
            except asyncio.CancelledError:
                # only a run replaced by a newer one is waited past
                superseded = self._pending is not None and self._pending is not pending
                if not superseded or not pending.cancelled():
                    raise
        return self.result

    def invalidate(self) -> None:
        """Forget the cached result, locally and in the shared store."""
        if self.store is not None and self._cache_key is not None:
            self.store.delete(digest(self._cache_key))
        self._cache_key = None
        self._cached = None

    @property
    def errors(self) -> List[ValidationItem]:
        return self.result.errors

    @property
    def warnings(self) -> List[ValidationItem]:
        return self.result.warnings

    @property
    def categories(self) -> ValidationCategory:
        return categorize(self.result.errors, self.result.warnings)

    @property
    def errors_by_field(self) -> Dict[str, List[ValidationItem]]:
        return errors_by_field(self.result.errors)

    def field_validation(self, field: str, ad_group_index: int, ad_index: int) -> FieldValidation:
        return field_validation(self.result.errors, self.result.warnings, field, ad_group_index, ad_index)
