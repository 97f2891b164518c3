"""Tests for platform limits and individual validation rules."""

import pytest

from campaign_builder.hierarchy.models import AdField
from campaign_builder.validation.models import CounterState, IssueType, Platform
from campaign_builder.validation.platforms import (
    PLATFORM_LIMITS,
    PlatformLimits,
    counter_state,
    get_field_limit,
    most_restrictive_limit,
    register_platform
)
from campaign_builder.validation.rules import (
    check_display_url,
    check_interpolated_length,
    check_static_length,
    check_variable_references,
    validate_display_url,
    validate_url
)


class TestPlatformLimits:
    """Test cases for per-platform limits."""

    def test_known_limits(self):
        assert get_field_limit(Platform.GOOGLE, AdField.HEADLINE) == 30
        assert get_field_limit("reddit", AdField.DESCRIPTION) == 500
        assert get_field_limit("facebook", AdField.DISPLAY_URL) == 30
        assert get_field_limit("google", AdField.FINAL_URL) is None
        assert get_field_limit("tiktok", AdField.HEADLINE) is None

    def test_no_platforms_means_google(self):
        assert most_restrictive_limit(AdField.HEADLINE, []) == 30
        assert most_restrictive_limit(AdField.DESCRIPTION, None) == 90

    def test_smallest_limit_wins(self):
        assert most_restrictive_limit(AdField.HEADLINE, ["reddit", "facebook"]) == 40
        assert most_restrictive_limit(AdField.DISPLAY_URL, ["google", "reddit"]) == 25

    def test_unknown_platform_uses_default(self):
        assert most_restrictive_limit(AdField.HEADLINE, ["tiktok"]) == 100
        assert most_restrictive_limit(AdField.HEADLINE, ["tiktok"], default=50) == 50
        assert most_restrictive_limit(AdField.HEADLINE, ["tiktok", "reddit"]) == 100

    def test_register_platform(self):
        try:
            register_platform("linkedin", PlatformLimits(headline=25))
            assert most_restrictive_limit(AdField.HEADLINE, ["google", "linkedin"]) == 25
            assert most_restrictive_limit(AdField.DESCRIPTION, ["linkedin"]) == 100
        finally:
            PLATFORM_LIMITS.pop("linkedin", None)


class TestCounterState:
    """Test cases for counter_state."""

    @pytest.mark.parametrize("length,expected", [
        (0, CounterState.NORMAL),
        (79, CounterState.NORMAL),
        (80, CounterState.WARNING),
        (94, CounterState.WARNING),
        (95, CounterState.DANGER),
        (100, CounterState.DANGER),
        (101, CounterState.OVER),
    ])
    def test_thresholds(self, length, expected):
        assert counter_state(length, 100) == expected

    def test_custom_ratios(self):
        assert counter_state(5, 10, warning_ratio=0.5, danger_ratio=0.9) == CounterState.WARNING


class TestVariableReferences:
    """Test cases for check_variable_references."""

    def test_known_columns_are_case_insensitive(self):
        assert check_variable_references("{Brand} {product}", "headline", {"brand", "product"}) == []

    def test_unknown_variable_reported_once(self):
        items = check_variable_references("{missing} and {missing}", "headline", {"brand"}, 0, 1)
        assert len(items) == 1
        assert items[0].message == 'Variable "{missing}" not found in data source columns'
        assert items[0].issue_type == IssueType.MISSING_VARIABLE
        assert items[0].field_key == "headline-0-1"

    def test_filters_are_not_checked(self):
        assert check_variable_references("{brand|uppercase}", "headline", {"brand"}) == []


class TestLengthRules:
    """Test cases for static and interpolated length checks."""

    def test_static_length_at_limit_is_valid(self):
        assert check_static_length("A" * 30, AdField.HEADLINE, 30) == []

    def test_static_length_over_limit(self):
        items = check_static_length("A" * 31, AdField.HEADLINE, 30, 0, 0)
        assert [item.message for item in items] == ["Headline exceeds 30 character limit (31/30)"]
        assert items[0].issue_type == IssueType.CHARACTER_LIMIT_EXCEEDED

    def test_bare_variable_is_exempt_from_static_check(self):
        assert check_static_length("{a_very_long_column_name_for_headlines}", AdField.HEADLINE, 30) == []

    def test_interpolated_overflow_is_aggregated(self):
        rows = [{"title": "x" * 30}, {"title": "short"}, {"title": "y" * 40}]
        items = check_interpolated_length("{title} - Shop", AdField.HEADLINE, 30, rows)
        assert [item.message for item in items] == ["2 rows exceed headline limit (30 chars)"]

    def test_interpolated_single_row(self):
        items = check_interpolated_length("{d}", AdField.DISPLAY_URL, 5, [{"d": "toolong"}])
        assert items[0].message == "1 row exceed display URL limit (5 chars)"

    def test_interpolated_skips_static_patterns_and_empty_data(self):
        assert check_interpolated_length("A" * 40, AdField.HEADLINE, 30, [{"a": 1}]) == []
        assert check_interpolated_length("{title}", AdField.HEADLINE, 30, []) == []


class TestUrlRules:
    """Test cases for final and display URL checks."""

    @pytest.mark.parametrize("url", ["", "   ", None, "{final_url}", "https://x.com/{path}", "https://shop.example.com/p?id=1"])
    def test_valid_final_urls(self, url):
        assert validate_url(url).valid

    @pytest.mark.parametrize("url,message", [
        ("http://x.com", "URL must use HTTPS protocol"),
        ("not a url", "URL must start with https://"),
        ("{domain}/path", "URL must start with https://"),
        ("https://x.com/a b", "URL must not contain spaces"),
        ("https://", "Invalid URL format"),
    ])
    def test_invalid_final_urls(self, url, message):
        result = validate_url(url)
        assert not result.valid
        assert result.errors == [message]

    def test_display_url(self):
        assert validate_display_url("nike.com/shoes", 30).valid
        result = validate_display_url("nike.com/running shoes for everyone", 30)
        assert result.errors == [
            "Display URL exceeds 30 character limit (35/30)",
            "Display URL must not contain spaces",
        ]

    def test_display_url_items(self):
        items = check_display_url("a b", 30, 0, 0)
        assert items[0].issue_type == IssueType.INVALID_URL_FORMAT
        assert check_display_url("{display_url}", 5) == []
