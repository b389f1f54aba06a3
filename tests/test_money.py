# Tests for fixed-point money helpers

from decimal import Decimal

import pytest

from pgrent.billing.money import format_money, split_amount, sum_money, to_money
from pgrent.errors import ValidationError


class TestToMoney:
    """Test parsing of amounts into cent-quantized decimals."""

    def test_parses_strings_and_ints(self):
        assert to_money("1500") == Decimal("1500.00")
        assert to_money(42) == Decimal("42.00")

    def test_float_goes_through_str(self):
        assert to_money(0.1) == Decimal("0.10")
        assert to_money(0.1) + to_money(0.2) == Decimal("0.30")

    def test_rounds_half_up_to_cents(self):
        assert to_money("10.005") == Decimal("10.01")
        assert to_money("10.004") == Decimal("10.00")

    @pytest.mark.parametrize("value", [None, True, "abc", "", "NaN", "Infinity"])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValidationError):
            to_money(value)

    def test_error_names_the_field(self):
        with pytest.raises(ValidationError) as exc:
            to_money("x", "bill_amount")
        assert "bill_amount" in exc.value.message

    def test_too_many_digits_to_quantize(self):
        with pytest.raises(ValidationError) as exc:
            to_money("1e30", "bill_amount")
        assert "too large" in exc.value.message


class TestSplitAmount:
    def test_even_split(self):
        assert split_amount(Decimal("3000"), 3) == Decimal("1000.00")

    def test_truncates_remainder(self):
        share = split_amount(Decimal("1000"), 3)
        assert share == Decimal("333.33")
        assert share * 3 == Decimal("999.99")

    def test_never_rounds_up(self):
        assert split_amount(Decimal("100"), 6) == Decimal("16.66")

    def test_single_payer_gets_everything(self):
        assert split_amount("999.99", 1) == Decimal("999.99")

    def test_zero_parts_raises(self):
        with pytest.raises(ValidationError):
            split_amount(Decimal("100"), 0)


def test_sum_money():
    assert sum_money(["0.10", 0.2, Decimal("1")]) == Decimal("1.30")
    assert sum_money([]) == Decimal("0.00")


def test_format_money():
    assert format_money(Decimal("5")) == "5.00"
    assert format_money("1234.5") == "1234.50"
    assert format_money(None) is None
