"""Tests for the validation engine, categorizer and cached Validator."""

import asyncio
from unittest.mock import MagicMock

import pytest

from campaign_builder.errors import ConfigurationError
from campaign_builder.hierarchy.models import (
    AdDefinition,
    AdGroupDefinition,
    DataSourceColumn,
    HierarchyConfig
)
from campaign_builder.utils.cache import MemoryResultStore
from campaign_builder.validation.categorizer import categorize, category_of, errors_by_field
from campaign_builder.validation.engine import (
    Validator,
    build_cache_key,
    check_character_limits,
    validate_hierarchy
)
from campaign_builder.validation.models import ValidationItem, ValidationResult


def _config(**ad_fields) -> HierarchyConfig:
    return HierarchyConfig(ad_groups=[
        AdGroupDefinition(name_pattern="{product}", ads=[AdDefinition(**ad_fields)])
    ])


COLUMNS = [DataSourceColumn(name="product"), DataSourceColumn(name="title")]


class TestValidateHierarchy:
    """Test cases for validate_hierarchy."""

    def test_valid_configuration(self, hierarchy_config, sample_rows, columns):
        result = validate_hierarchy(hierarchy_config, sample_rows, ["google"], columns)
        assert result.errors == []
        assert result.warnings == []
        assert result.is_valid

    def test_unknown_variable_in_name_pattern(self):
        config = HierarchyConfig(ad_groups=[AdGroupDefinition(name_pattern="{category}")])
        result = validate_hierarchy(config, [], [], COLUMNS)
        assert len(result.errors) == 1
        assert result.errors[0].field == "namePattern"
        assert result.errors[0].ad_group_index == 0
        assert result.errors[0].ad_index is None

    def test_aggregated_row_overflow(self):
        rows = [{"title": "x" * 30}, {"title": "short"}, {"title": "y" * 40}]
        result = validate_hierarchy(_config(headline="{title} - Shop"), rows, ["google"], COLUMNS)
        messages = [item.message for item in result.errors]
        assert messages == ["2 rows exceed headline limit (30 chars)"]
        assert result.errors[0].field == "headline"

    def test_bare_variable_only_checked_against_rows(self):
        config = _config(headline="{title}")
        assert validate_hierarchy(config, [], ["google"], COLUMNS).errors == []

        result = validate_hierarchy(config, [{"title": "z" * 31}], ["google"], COLUMNS)
        assert [item.message for item in result.errors] == ["1 row exceed headline limit (30 chars)"]

    def test_most_restrictive_platform_applies(self):
        config = _config(headline="H" * 35)
        assert validate_hierarchy(config, [], ["reddit"], COLUMNS).errors == []
        result = validate_hierarchy(config, [], ["reddit", "facebook", "google"], COLUMNS)
        assert result.errors[0].message == "Headline exceeds 30 character limit (35/30)"

    def test_final_url_rules(self):
        result = validate_hierarchy(_config(final_url="http://{product}.com"), [], [], COLUMNS)
        assert [(item.field, item.message) for item in result.errors] == [
            ("finalUrl", "URL must use HTTPS protocol")
        ]

    def test_missing_variable_and_url_error_both_reported(self):
        result = validate_hierarchy(_config(final_url="shop/{sku}"), [], [], COLUMNS)
        assert [item.message for item in result.errors] == [
            'Variable "{sku}" not found in data source columns',
            "URL must start with https://",
        ]

    def test_display_url_static_and_row_checks(self):
        rows = [{"product": "p" * 40}]
        result = validate_hierarchy(_config(display_url="shop.com/{product}"), rows, [], COLUMNS)
        assert [item.message for item in result.errors] == ["1 row exceed display URL limit (30 chars)"]

        result = validate_hierarchy(_config(display_url="shop.com/a b"), [], [], COLUMNS)
        assert [item.message for item in result.errors] == ["Display URL must not contain spaces"]


class TestCategorizer:
    """Test cases for message categorization."""

    @pytest.mark.parametrize("message,category", [
        ("Headline exceeds 30 character limit (31/30)", "character_limits"),
        ("2 rows exceed headline limit (30 chars)", "character_limits"),
        ("Display URL exceeds 30 character limit (35/30)", "character_limits"),
        ("URL must use HTTPS protocol", "url_format"),
        ("Invalid URL format", "url_format"),
        ("Bid strategy is required", "required_fields"),
        ('Variable "{x}" not found in data source columns', "variable_references"),
        ("Something unexpected", "character_limits"),
    ])
    def test_category_of(self, message, category):
        assert category_of(message) == category

    def test_categorize_keeps_warnings(self):
        errors = [
            ValidationItem(field="budget", message="Budget is required", step="budget"),
            ValidationItem(field="finalUrl", message="Invalid URL format", ad_group_index=0, ad_index=0),
        ]
        warnings = [ValidationItem(field="headline", message="Consider a shorter headline")]
        categories = categorize(errors, warnings)
        assert categories.required_fields == [errors[0]]
        assert categories.url_format == [errors[1]]
        assert categories.warnings == warnings

    def test_errors_by_field(self):
        item = ValidationItem(field="headline", message="x", ad_group_index=1, ad_index=2)
        assert errors_by_field([item]) == {"headline-1-2": [item]}


def test_check_character_limits(hierarchy_config, sample_rows):
    summary = check_character_limits(sample_rows, hierarchy_config, "google")
    assert summary.platform == "google"
    assert summary.total_overflows == 0
    assert summary.warnings == []

    long_rows = [{"product": "p" * 40, "brand": "b", "price": "1", "url": "u"}]
    summary = check_character_limits(long_rows, hierarchy_config, "google")
    assert summary.headline_overflows == 1
    assert summary.warnings[0].overflow == len("Buy " + "p" * 40) - 30
    assert summary.warnings[0].row_index == 0


class TestCacheKey:
    """Test cases for build_cache_key."""

    def test_row_content_does_not_change_key(self, hierarchy_config, columns):
        first = build_cache_key(hierarchy_config, [{"brand": "a"}], ["google"], columns)
        second = build_cache_key(hierarchy_config, [{"brand": "b"}], ["google"], columns)
        assert first == second

    def test_row_count_and_platforms_change_key(self, hierarchy_config, columns):
        base = build_cache_key(hierarchy_config, [{}], ["google"], columns)
        assert base != build_cache_key(hierarchy_config, [{}, {}], ["google"], columns)
        assert base != build_cache_key(hierarchy_config, [{}], ["reddit"], columns)
        assert base != build_cache_key(hierarchy_config, [{}], ["google"], columns[:1])


class TestValidator:
    """Test cases for the cached, debounced Validator."""

    @pytest.fixture
    def evaluator(self):
        return MagicMock(return_value=ValidationResult())

    def test_none_config_gives_empty_result(self, evaluator):
        validator = Validator(evaluator=evaluator, debounce_seconds=0)
        result = validator.validate(None, [], [], [])
        assert result.errors == [] and result.warnings == []
        evaluator.assert_not_called()

    def test_cache_hit_returns_same_object(self, evaluator, hierarchy_config, columns):
        validator = Validator(evaluator=evaluator, debounce_seconds=0)
        first = validator.validate(hierarchy_config, [{"a": 1}], ["google"], columns)
        second = validator.validate(hierarchy_config, [{"a": 2}], ["google"], columns)
        assert first is second
        assert evaluator.call_count == 1

        validator.validate(hierarchy_config, [{"a": 1}, {"a": 2}], ["google"], columns)
        assert evaluator.call_count == 2

    def test_negative_debounce_rejected(self):
        with pytest.raises(ConfigurationError):
            Validator(debounce_seconds=-1)

    def test_default_debounce_from_settings(self):
        assert Validator().debounce_seconds == 0.3

    def test_shared_store_skips_evaluation(self, hierarchy_config, columns):
        store = MemoryResultStore()
        item = ValidationItem(field="headline", message="Headline exceeds 30 character limit (31/30)")
        first = Validator(evaluator=MagicMock(return_value=ValidationResult(errors=[item])), store=store)
        first.validate(hierarchy_config, [], [], columns)
        assert len(store) == 1

        second_evaluator = MagicMock()
        second = Validator(evaluator=second_evaluator, store=store)
        result = second.validate(hierarchy_config, [], [], columns)
        second_evaluator.assert_not_called()
        assert result.errors == [item]

    @pytest.mark.asyncio
    async def test_schedule_debounces(self, evaluator, hierarchy_config, columns):
        on_result = MagicMock()
        validator = Validator(evaluator=evaluator, debounce_seconds=0.02, on_result=on_result)

        first = validator.schedule(hierarchy_config, [{}], ["google"], columns)
        validator.schedule(hierarchy_config, [{}], ["reddit"], columns)
        assert validator.is_validating

        await validator.wait()
        assert first.cancelled()
        assert evaluator.call_count == 1
        assert evaluator.call_args.args[2] == ["reddit"]
        on_result.assert_called_once()
        assert not validator.is_validating

    @pytest.mark.asyncio
    async def test_cancel_prevents_run(self, evaluator, hierarchy_config, columns):
        validator = Validator(evaluator=evaluator, debounce_seconds=0.01)
        validator.schedule(hierarchy_config, [], [], columns)
        validator.cancel()
        await asyncio.sleep(0.03)
        evaluator.assert_not_called()
        assert (await validator.wait()).errors == []

    @pytest.mark.asyncio
    async def test_result_accessors(self):
        config = _config(headline="{unknown}")
        validator = Validator(debounce_seconds=0)
        validator.schedule(config, [], [], COLUMNS)
        await validator.wait()

        assert len(validator.errors) == 1
        assert validator.categories.variable_references == validator.errors
        assert "headline-0-0" in validator.errors_by_field
        state = validator.field_validation("headline", 0, 0)
        assert state.has_error
        assert not validator.field_validation("description", 0, 0).has_error

    @pytest.mark.asyncio
    async def test_cancelled_wait_returns_promptly(self, evaluator, hierarchy_config, columns):
        validator = Validator(evaluator=evaluator, debounce_seconds=0.05)
        validator.schedule(hierarchy_config, [], [], columns)
        waiter = asyncio.ensure_future(validator.wait())
        await asyncio.sleep(0)

        waiter.cancel()
        done, _ = await asyncio.wait({waiter}, timeout=1.0)

        assert waiter in done
        assert waiter.cancelled()
        assert not validator.is_validating
        evaluator.assert_not_called()
        assert (await asyncio.wait_for(validator.wait(), timeout=1.0)).errors == []

    @pytest.mark.asyncio
    async def test_wait_follows_superseding_run(self, evaluator, hierarchy_config, columns):
        validator = Validator(evaluator=evaluator, debounce_seconds=0.02)
        validator.schedule(hierarchy_config, [{}], ["google"], columns)
        waiter = asyncio.ensure_future(validator.wait())
        await asyncio.sleep(0)

        validator.schedule(hierarchy_config, [{}], ["reddit"], columns)
        await asyncio.wait_for(waiter, timeout=1.0)

        assert evaluator.call_count == 1
        assert evaluator.call_args.args[2] == ["reddit"]
        assert not validator.is_validating

    def test_invalidate_drops_cached_and_stored_result(self, evaluator, hierarchy_config, columns):
        store = MemoryResultStore()
        validator = Validator(evaluator=evaluator, debounce_seconds=0, store=store)
        validator.validate(hierarchy_config, [], [], columns)
        assert len(store) == 1

        validator.invalidate()
        assert len(store) == 0

        validator.validate(hierarchy_config, [], [], columns)
        assert evaluator.call_count == 2
