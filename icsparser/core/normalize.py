"""
Dutch locale normalization: dates and decimal-comma amounts.
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation
import logging

from .errors import InvalidDateFormat, UnknownMonth, InvalidAmount

logger = logging.getLogger(__name__)


# 1-based month numbers. "mrt" is not a truncation of "maart".
DUTCH_MONTHS = {
    'jan': 1, 'feb': 2, 'mrt': 3, 'apr': 4, 'mei': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'okt': 10, 'nov': 11, 'dec': 12,
}

DUTCH_FULL_MONTHS = {
    'januari': 1, 'februari': 2, 'maart': 3, 'april': 4, 'mei': 5, 'juni': 6,
    'juli': 7, 'augustus': 8, 'september': 9, 'oktober': 10, 'november': 11, 'december': 12,
}

ABBREVIATED_DATE_RE = re.compile(r'^(\d{1,2})\s+([a-z]{3})\.?$', re.IGNORECASE)
FULL_DATE_RE = re.compile(r'^(\d{1,2})\s+([a-z]+)\s+(\d{4})$', re.IGNORECASE)
FULL_DATE_PATTERN = r'\d{1,2}\s+(?:' + '|'.join(DUTCH_FULL_MONTHS) + r')\s+\d{4}'

_NUMBER_RE = re.compile(r'^-?\d+(?:\.\d+)?$')
_CENTS = Decimal('0.01')


def is_abbreviated_date(token: str) -> bool:
    """Check whether a token has the "DD mmm." shape used in transaction rows."""
    return bool(ABBREVIATED_DATE_RE.match(token.strip()))


def _build_date(year: int, month: int, day: int, token: str) -> date:
    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDateFormat(f"Cannot parse Dutch date: {token!r} ({e})") from e


def parse_dutch_abbreviated_date(token: str, statement_year: int, statement_month: int) -> date:
    """
    Parse a transaction date like "30 dec." or "06 jan".

    The statement only prints day and month. A month later in the year than
    the statement month belongs to the previous year, so a December purchase
    on a January statement resolves to last year.

    Args:
        token: Raw date token
        statement_year: Year of the statement date
        statement_month: Zero-based month of the statement date (0 = January)

    Returns:
        Resolved date

    Raises:
        InvalidDateFormat: token is not "<day> <abbr>[.]"
        UnknownMonth: abbreviation is not a Dutch month
    """
    match = ABBREVIATED_DATE_RE.match(token.strip())
    if not match:
        raise InvalidDateFormat(f"Cannot parse Dutch date: {token!r}")

    day = int(match.group(1))
    month_name = match.group(2).lower()
    month = DUTCH_MONTHS.get(month_name)
    if month is None:
        raise UnknownMonth(f"Unknown Dutch month: {month_name!r}")

    # DUTCH_MONTHS is 1-based, statement_month is 0-based
    year = statement_year - 1 if month - 1 > statement_month else statement_year
    return _build_date(year, month, day, token)


def parse_dutch_full_date(token: str) -> date:
    """
    Parse a full Dutch date like "26 januari 2026".

    Raises:
        InvalidDateFormat: token is not "<day> <month> <year>"
        UnknownMonth: month name is not a Dutch month
    """
    match = FULL_DATE_RE.match(token.strip())
    if not match:
        raise InvalidDateFormat(f"Cannot parse full Dutch date: {token!r}")

    month_name = match.group(2).lower()
    month = DUTCH_FULL_MONTHS.get(month_name)
    if month is None:
        raise UnknownMonth(f"Unknown Dutch month: {month_name!r}")

    return _build_date(int(match.group(3)), month, int(match.group(1)), token)


def parse_dutch_decimal(token: str) -> Decimal:
    """
    Parse a decimal-comma number like "1,08229" without rounding.

    When a comma is present any periods are thousands separators
    ("1.234,56"); without one the token is read as-is ("28.90").

    Raises:
        InvalidAmount: token is not a number
    """
    cleaned = re.sub(r'\s', '', token or '')
    if ',' in cleaned:
        cleaned = cleaned.replace('.', '').replace(',', '.', 1)

    if not _NUMBER_RE.match(cleaned):
        raise InvalidAmount(f"Cannot parse amount: {token!r}")

    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise InvalidAmount(f"Cannot parse amount: {token!r}") from e


def parse_dutch_amount(token: str) -> Decimal:
    """
    Parse a Dutch money amount like "36,00" or " 13,99 ".

    Returns:
        Decimal with exactly two decimal places

    Raises:
        InvalidAmount: token is not a number
    """
    return parse_dutch_decimal(token).quantize(_CENTS)
