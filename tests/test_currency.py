"""
Unit tests for Indian currency formatting and amount-to-words.
"""
import pytest
from decimal import Decimal

from jewelry_invoice.utils.currency import (
    amount_in_words, format_indian, format_rupees, format_weight, group_indian, to_words,
)


class TestIndianGrouping:
    """Test suite for lakh/crore digit grouping"""

    @pytest.mark.parametrize("amount, expected", [
        (Decimal("500"), "500"),
        (Decimal("1000"), "1,000"),
        (Decimal("100000"), "1,00,000"),
        (Decimal("1234567"), "12,34,567"),
        (Decimal("123456789"), "12,34,56,789"),
    ])
    def test_grouping(self, amount, expected):
        """Test that digits group 3 then 2"""
        assert format_indian(amount) == expected

    def test_group_short_strings_unchanged(self):
        """Test that three digits or fewer are left alone"""
        assert group_indian("999") == "999"
        assert group_indian("7") == "7"

    def test_fraction_dropped_without_decimals(self):
        """Test that the fractional part is dropped when decimals are off"""
        assert format_indian(Decimal("359531.99")) == "3,59,531"

    def test_two_decimals_half_up(self):
        """Test that decimals mode rounds half-up to two places"""
        assert format_indian(Decimal("1234567.885"), decimals=True) == "12,34,567.89"
        assert format_indian(Decimal("0.005"), decimals=True) == "0.01"

    def test_negative_amount(self):
        """Test that the sign stays in front of the grouped digits"""
        assert format_indian(Decimal("-1234.5"), decimals=True) == "-1,234.50"

    def test_rupee_prefix(self):
        """Test rupee symbol formatting"""
        assert format_rupees(Decimal("359531")) == "₹3,59,531"


class TestAmountInWords:
    """Test suite for lakh/crore amount spelling"""

    @pytest.mark.parametrize("amount, expected", [
        (0, "Zero"),
        (21, "Twenty One"),
        (1000, "One Thousand"),
        (100000, "One Lakh"),
        (10000000, "One Crore"),
        (67980, "Sixty Seven Thousand Nine Hundred Eighty"),
        (123456789, "Twelve Crore Thirty Four Lakh Fifty Six Thousand Seven Hundred Eighty Nine"),
    ])
    def test_integer_amounts(self, amount, expected):
        """Test that integer amounts are spelled with Indian magnitudes"""
        assert to_words(amount) == expected

    def test_paise_remainder(self):
        """Test that paise are appended as a fraction of 100"""
        assert to_words(Decimal("1250.50")) == "One Thousand Two Hundred Fifty and 50/100"

    def test_negative_prefixed_with_minus(self):
        """Test that negative amounts keep their sign in words"""
        assert to_words(Decimal("-1000")) == "Minus One Thousand"
        assert to_words(Decimal("-0.50")) == "Minus Zero and 50/100"

    def test_rounds_to_zero_without_sign(self):
        assert to_words(Decimal("-0.004")) == "Zero"

    def test_invoice_phrase(self):
        """Test the full phrase printed on the invoice"""
        assert amount_in_words(Decimal("1000")) == "Rupees One Thousand Only"


class TestWeightFormatting:
    """Test suite for weight display"""

    def test_one_place_half_up(self):
        """Test that weights round half-up to one place by default"""
        assert format_weight(Decimal("10.25")) == "10.3"

    def test_custom_places(self):
        """Test formatting with three places"""
        assert format_weight(Decimal("0.2"), places=3) == "0.200"
