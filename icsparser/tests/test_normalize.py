"""
Tests for Dutch date and amount parsing.
"""
import pytest
from datetime import date
from decimal import Decimal

from ..core.errors import InvalidDateFormat, UnknownMonth, InvalidAmount
from ..core.normalize import (
    parse_dutch_abbreviated_date, parse_dutch_full_date, parse_dutch_amount,
    parse_dutch_decimal, is_abbreviated_date,
)


class TestAbbreviatedDate:
    """Dates like "06 jan." with the year taken from the statement."""

    def test_date_within_statement_month(self):
        assert parse_dutch_abbreviated_date("06 jan.", 2026, 0) == date(2026, 1, 6)

    def test_december_on_january_statement_is_previous_year(self):
        assert parse_dutch_abbreviated_date("30 dec.", 2026, 0) == date(2025, 12, 30)

    def test_trailing_period_is_optional(self):
        assert parse_dutch_abbreviated_date("15 mrt", 2026, 2) == date(2026, 3, 15)

    def test_single_digit_day(self):
        assert parse_dutch_abbreviated_date("2 jan.", 2026, 0) == date(2026, 1, 2)

    def test_earlier_month_keeps_statement_year(self):
        assert parse_dutch_abbreviated_date("10 feb.", 2026, 2) == date(2026, 2, 10)

    def test_case_insensitive(self):
        assert parse_dutch_abbreviated_date("01 OKT", 2025, 9) == date(2025, 10, 1)

    @pytest.mark.parametrize("statement_month", range(12))
    def test_later_months_resolve_to_previous_year(self, statement_month):
        months = ['jan', 'feb', 'mrt', 'apr', 'mei', 'jun', 'jul', 'aug', 'sep', 'okt', 'nov', 'dec']
        for month_index, name in enumerate(months):
            resolved = parse_dutch_abbreviated_date(f"01 {name}.", 2026, statement_month)
            expected_year = 2025 if month_index > statement_month else 2026
            assert resolved.year == expected_year
            assert resolved.month == month_index + 1

    def test_unknown_month(self):
        with pytest.raises(UnknownMonth, match="Unknown Dutch month"):
            parse_dutch_abbreviated_date("15 xyz.", 2026, 0)

    def test_invalid_format(self):
        with pytest.raises(InvalidDateFormat, match="Cannot parse Dutch date"):
            parse_dutch_abbreviated_date("invalid", 2026, 0)

    def test_full_month_name_is_not_abbreviated(self):
        with pytest.raises(InvalidDateFormat):
            parse_dutch_abbreviated_date("15 maart", 2026, 2)

    def test_impossible_day(self):
        with pytest.raises(InvalidDateFormat):
            parse_dutch_abbreviated_date("31 feb.", 2026, 1)

    def test_is_abbreviated_date(self):
        assert is_abbreviated_date("06 jan.")
        assert is_abbreviated_date(" 6 mei ")
        assert not is_abbreviated_date("26 januari 2026")
        assert not is_abbreviated_date("ALBERT HEIJN")


class TestFullDate:
    def test_full_date(self):
        assert parse_dutch_full_date("26 januari 2026") == date(2026, 1, 26)

    def test_maart(self):
        assert parse_dutch_full_date("1 maart 2025") == date(2025, 3, 1)

    def test_abbreviation_is_not_a_full_month(self):
        with pytest.raises(UnknownMonth):
            parse_dutch_full_date("1 mrt 2025")

    def test_missing_year(self):
        with pytest.raises(InvalidDateFormat):
            parse_dutch_full_date("26 januari")


class TestAmount:
    def test_comma_amount(self):
        assert parse_dutch_amount("36,00") == Decimal("36.00")

    def test_surrounding_spaces(self):
        assert parse_dutch_amount(" 13,99 ") == Decimal("13.99")

    def test_two_decimal_places(self):
        amount = parse_dutch_amount("692,5")
        assert amount == Decimal("692.50")
        assert amount.as_tuple().exponent == -2

    def test_period_decimal(self):
        assert parse_dutch_amount("28.90") == Decimal("28.90")

    def test_thousands_separator(self):
        assert parse_dutch_amount("1.234,56") == Decimal("1234.56")

    def test_invalid_amount(self):
        with pytest.raises(InvalidAmount, match="Cannot parse amount"):
            parse_dutch_amount("abc")

    @pytest.mark.parametrize("token", ["", ",", "NaN", "Infinity", "12,34,56", "Af"])
    def test_rejects_non_numbers(self, token):
        with pytest.raises(InvalidAmount):
            parse_dutch_amount(token)

    def test_decimal_keeps_precision(self):
        assert parse_dutch_decimal("1,08229") == Decimal("1.08229")
