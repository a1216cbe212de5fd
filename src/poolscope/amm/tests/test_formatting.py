"""
Tests for display formatting helpers.
"""

from decimal import Decimal

import pytest

from poolscope.amm.formatting import (
    format_address,
    format_fee_tier,
    format_price_for_ui,
    format_price_range,
    format_units,
    parse_units,
)
from poolscope.errors import InvalidInputError


class TestPriceDisplay:

    @pytest.mark.parametrize(
        "price,expected",
        [
            (Decimal("1"), "1"),
            (Decimal("1.23456789"), "1.234568"),
            (Decimal("0.0000015"), "0.000002"),
            (Decimal("0.0000001"), "0"),
            (Decimal(0), "0"),
            (Decimal("999999.5"), "999999.5"),
            (Decimal("1000001"), "∞"),
            ("2.50", "2.5"),
        ],
    )
    def test_format_price_for_ui(self, price, expected):
        assert format_price_for_ui(price) == expected

    def test_format_price_range(self):
        assert format_price_range(0, 0) == "1 ~ 1"
        assert format_price_range(-1, 1) == "0.9999 ~ 1.0001"

    def test_extreme_range_collapses(self):
        assert format_price_range(-887220, 887220) == "0 ~ ∞"


class TestFeeTier:
    """Fee tiers are parts-per-million shown as percentages."""

    @pytest.mark.parametrize("fee,expected", [(500, "0.05%"), (3000, "0.3%"), (10000, "1%")])
    def test_format_fee_tier(self, fee, expected):
        assert format_fee_tier(fee) == expected


class TestAddress:

    def test_shortens(self):
        assert format_address("0x" + "a" * 36 + "1234") == "0xaaaa...1234"

    def test_empty(self):
        assert format_address("") == ""


class TestUnits:

    @pytest.mark.parametrize(
        "amount,decimals,expected",
        [
            (0, 18, "0"),
            (10**18, 18, "1"),
            (15 * 10**17, 18, "1.5"),
            (1, 18, "0.000000000000000001"),
            (1234567, 6, "1.234567"),
            (2**256 - 1, 0, str(2**256 - 1)),
        ],
    )
    def test_format_units(self, amount, decimals, expected):
        assert format_units(amount, decimals) == expected

    def test_format_units_rejects_non_int(self):
        with pytest.raises(InvalidInputError):
            format_units(1.5)

    @pytest.mark.parametrize(
        "text,decimals,expected",
        [
            ("1", 18, 10**18),
            ("1.5", 18, 15 * 10**17),
            (" 2 ", 6, 2 * 10**6),
            ("0.0000000000000000019", 18, 1),
            ("1.9999999", 6, 1999999),
            (Decimal("0.5"), 2, 50),
        ],
    )
    def test_parse_units(self, text, decimals, expected):
        assert parse_units(text, decimals) == expected

    @pytest.mark.parametrize("text", ["", "abc", "-1", "NaN", "Infinity"])
    def test_parse_units_rejects(self, text):
        with pytest.raises(InvalidInputError):
            parse_units(text)
