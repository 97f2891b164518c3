"""Tests for pattern value filters."""

import pytest

from campaign_builder.patterns.filters import apply_filters, is_known_filter, split_filter


@pytest.mark.parametrize("value,chain,expected", [
    ("nIKE", "capitalize", "Nike"),
    ("Hello World", "lowercase", "hello world"),
    ("Running Shoes & More!", "slug", "running-shoes-more"),
    ("short", "truncate:10", "short"),
    ("abcdefghij", "truncate:4:~", "abcd~"),
    ("abc", "truncate:x", "abc"),
    ("1234.5", "currency:EUR", "€1,234.50"),
    ("-5", "currency", "-$5.00"),
    ("12", "currency:CHF", "CHF 12.00"),
    ("n/a", "currency", "n/a"),
    ("1234567", "number", "1,234,567"),
    ("3.14159", "number:2", "3.14"),
    ("0.256", "percent", "25.6%"),
    ("", "default:None", "None"),
    ("set", "default:None", "set"),
])
def test_filters(value, chain, expected):
    assert apply_filters(value, chain) == expected


def test_extra_arguments_leave_value_unchanged():
    assert apply_filters("Nike", "uppercase:x") == "Nike"


def test_chain_skips_unknown_names():
    assert apply_filters(" nike ", "fallback_column|trim|uppercase") == "NIKE"


def test_split_filter():
    assert split_filter(" truncate:20:...") == ["truncate", "20", "..."]
    assert is_known_filter("slug")
    assert not is_known_filter("sparkle")
