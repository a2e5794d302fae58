"""Tests for money, GST and amount-in-words helpers."""

import pytest

from bizdocs.domain.models.enums import TaxMode
from bizdocs.domain.services.money import (
    amount_in_words,
    coerce_number,
    format_amount,
    format_quantity,
    gst_breakup,
    integer_to_words_indian,
    line_amount,
    round_half_up,
    to_money,
)


class TestCoercion:
    """Bad numeric input becomes 0, never NaN."""

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", float("nan"), float("inf"), True, [1]])
    def test_unusable_values_become_zero(self, value):
        assert coerce_number(value) == 0.0

    def test_numeric_strings(self):
        assert coerce_number("12.5") == 12.5
        assert coerce_number(" 1,00,300 ") == 100300.0

    def test_negative_kept(self):
        assert coerce_number("-4") == -4.0


class TestFormatting:
    def test_to_money_two_decimals(self):
        assert to_money(1180) == "1180.00"
        assert to_money(2.675) == "2.68"
        assert to_money(-0.001) == "0.00"

    def test_indian_grouping(self):
        assert format_amount(100300) == "Rs. 1,00,300.00"
        assert format_amount(12345678.9) == "Rs. 1,23,45,678.90"
        assert format_amount(999, symbol="") == "999.00"

    def test_quantity(self):
        assert format_quantity(10.0) == "10"
        assert format_quantity("2.5") == "2.5"
        assert format_quantity(None) == "0"

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2


class TestGst:
    """GST split and line amounts."""

    def test_igst_only(self):
        split = gst_breakup(1000, 18, TaxMode.IGST)
        assert split.igst == pytest.approx(180)
        assert split.cgst == 0 and split.sgst == 0

    @pytest.mark.parametrize("base,rate", [(1000, 18), (333.33, 5), (12345.67, 28), (1, 12)])
    def test_cgst_sgst_symmetric_and_sums_to_igst(self, base, rate):
        split = gst_breakup(base, rate, TaxMode.CGST_SGST)
        assert split.cgst == split.sgst
        assert split.total == pytest.approx(gst_breakup(base, rate, TaxMode.IGST).igst)

    def test_mode_accepts_strings(self):
        assert gst_breakup(100, 18, "CGST+SGST").cgst == pytest.approx(9)

    def test_unknown_mode_raises(self):
        with pytest.raises(ValueError):
            gst_breakup(100, 18, "vat")

    def test_line_amount(self):
        assert line_amount(10, 100, 18) == pytest.approx(1180)
        assert line_amount("abc", 100, 18) == 0
        assert line_amount(2, 50) == 100

    def test_line_amount_is_idempotent(self):
        assert line_amount(3, 33.3, 12) == line_amount(3, 33.3, 12)


class TestAmountInWords:
    """Indian numbering: crore / lakh / thousand / hundred."""

    @pytest.mark.parametrize(
        "value,words",
        [
            (0, "zero"),
            (7, "seven"),
            (15, "fifteen"),
            (40, "forty"),
            (1180, "one thousand one hundred eighty"),
            (12345, "twelve thousand three hundred forty five"),
            (100000, "one lakh"),
            (1000000, "ten lakh"),
            (10000000, "one crore"),
            (123456789, "twelve crore thirty four lakh fifty six thousand seven hundred eighty nine"),
        ],
    )
    def test_integer_to_words(self, value, words):
        assert integer_to_words_indian(value) == words

    @pytest.mark.parametrize("value", [100, 200, 900, 1100, 5500, 123400])
    def test_hundreds_spelled(self, value):
        assert "hundred" in integer_to_words_indian(value)

    def test_fraction_is_floored(self):
        assert integer_to_words_indian(99.99) == "ninety nine"

    def test_negative_raises(self):
        with pytest.raises(ValueError):
            integer_to_words_indian(-1)

    def test_amount_in_words_rounds_half_up(self):
        assert amount_in_words(1180.4) == "Rupees one thousand one hundred eighty only"
        assert amount_in_words(1180.5) == "Rupees one thousand one hundred eighty one only"
