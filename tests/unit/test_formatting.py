"""Unit tests for currency display formatting."""
import pytest
from decimal import Decimal

from app.services.pricing.formatting import format_currency


class TestFormatCurrency:
    """Test currency formatting."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (Decimal("0"), "₹0.00"),
            (Decimal("575"), "₹575.00"),
            (Decimal("1234.5"), "₹1,234.50"),
            (Decimal("123456.7"), "₹1,23,456.70"),
            (Decimal("10000000"), "₹1,00,00,000.00"),
        ],
    )
    def test_indian_grouping(self, amount, expected):
        """Test lakh/crore digit grouping for en-IN."""
        assert format_currency(amount) == expected

    def test_western_grouping(self):
        """Test thousands grouping for other locales."""
        assert format_currency(Decimal("1234567.891"), symbol="$", locale="en-US") == "$1,234,567.89"

    def test_underscore_locale(self):
        """Test that en_IN is treated like en-IN."""
        assert format_currency(Decimal("123456"), locale="en_IN") == "₹1,23,456.00"

    def test_rounds_half_up(self):
        """Test that display rounding matches monetary rounding."""
        assert format_currency(Decimal("0.125")) == "₹0.13"
        assert format_currency(2.675) == "₹2.68"

    def test_negative_amount(self):
        """Test sign placement for negative amounts."""
        assert format_currency(Decimal("-1500")) == "-₹1,500.00"

    def test_accepts_ints_and_strings(self):
        """Test non-Decimal input."""
        assert format_currency(50) == "₹50.00"
        assert format_currency("99.9") == "₹99.90"

    def test_amount_beyond_order_limit(self):
        """Test that display formatting is not bound by stored amount limits."""
        assert format_currency(Decimal("1e9")) == "₹1,00,00,00,000.00"
        assert format_currency(Decimal("1e27"), symbol="$", locale="en-US").startswith("$1,000,000,")
