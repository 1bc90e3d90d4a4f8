"""
Conversion of classified rows into transactions.
"""
import re
from decimal import Decimal
from typing import Collection, List, Optional
import logging

from .errors import InvalidAmount
from .normalize import is_abbreviated_date, parse_dutch_abbreviated_date, parse_dutch_amount
from ..models.schema import Direction, Transaction

logger = logging.getLogger(__name__)

CODE_RE = re.compile(r'^[A-Z]{3}$')

DIRECTIONS = {
    'Af': Direction.DEBIT,
    'Bij': Direction.CREDIT,
}


def _try_amount(token: str) -> Optional[Decimal]:
    try:
        return parse_dutch_amount(token)
    except InvalidAmount:
        return None


def parse_transaction_row(tokens: List[str], statement_year: int, statement_month: int,
                          country_codes: Collection[str]) -> Optional[Transaction]:
    """
    Try to parse the texts of one row as a transaction.

    Expected layout, left to right::

        <tx date> <booking date> <merchant...> [city] [country]
            [foreign amount] [currency] <EUR amount> <Af|Bij>

    Args:
        tokens: Row fragment texts in reading order
        statement_year: Year of the statement date
        statement_month: Zero-based month of the statement date
        country_codes: Codes that are countries, not currencies

    Returns:
        Transaction, or None if the row does not have the transaction shape

    Raises:
        InvalidDateFormat, UnknownMonth: a date in a row that is otherwise a
            complete transaction cannot be read
    """
    texts = [t.strip() for t in tokens if t and t.strip()]
    if len(texts) < 3:
        return None

    date_tokens = []
    rest_start = 0
    for i, text in enumerate(texts):
        if is_abbreviated_date(text):
            date_tokens.append(text)
            if len(date_tokens) == 2:
                rest_start = i + 1
                break

    if len(date_tokens) < 2:
        return None

    rest = texts[rest_start:]
    if len(rest) < 2:
        return None

    direction = DIRECTIONS.get(rest[-1])
    if direction is None:
        return None

    amount_eur = _try_amount(rest[-2])
    if amount_eur is None:
        return None

    foreign_amount = None
    foreign_currency = None
    desc_end = len(rest) - 2

    # currency code sits right before the EUR amount, after its foreign amount
    for i in range(len(rest) - 3, max(0, len(rest) - 5) - 1, -1):
        token = rest[i]
        if CODE_RE.match(token) and token not in country_codes:
            if i > 0:
                foreign_amount = _try_amount(rest[i - 1])
                if foreign_amount is not None:
                    foreign_currency = token
                    desc_end = i - 1
            break

    desc_parts = rest[:desc_end]
    if not desc_parts:
        return None

    country = desc_parts[-1] if CODE_RE.match(desc_parts[-1]) else ''
    city = ''
    if country and len(desc_parts) >= 3:
        city = desc_parts[-2]
        merchant_parts = desc_parts[:-2]
    elif country and len(desc_parts) == 2:
        merchant_parts = desc_parts[:-1]
    else:
        merchant_parts = desc_parts

    return Transaction(
        transaction_date=parse_dutch_abbreviated_date(date_tokens[0], statement_year, statement_month),
        booking_date=parse_dutch_abbreviated_date(date_tokens[1], statement_year, statement_month),
        description=' '.join(merchant_parts),
        city=city,
        country=country,
        foreign_amount=foreign_amount,
        foreign_currency=foreign_currency,
        exchange_rate=None,
        amount_eur=amount_eur,
        direction=direction,
    )


def attach_exchange_rate(transactions: List[Transaction], index: int,
                         rate: Decimal) -> List[Transaction]:
    """
    Return a new list where the transaction at ``index`` carries ``rate``.

    A rate is attached at most once; a transaction that already has one is
    left unchanged.
    """
    target = transactions[index]
    if target.exchange_rate is not None:
        logger.warning(f"Transaction already has an exchange rate, ignoring {rate}: {target.description}")
        return list(transactions)

    updated = list(transactions)
    updated[index] = target.model_copy(update={'exchange_rate': rate})
    return updated
