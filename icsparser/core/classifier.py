"""
Row classification: decides what each reconstructed row is.

Every row gets exactly one outcome:

- ``Skip``: boilerplate, contact details, page numbers, cardholder names
- ``HeaderRow``: table captions and the summary totals row
- ``ExchangeRateAnnotation``: a "Wisselkoers <CUR> <rate>" line belonging to
  the transaction above it
- ``TransactionCandidate``: anything else, handed to the transaction parser
"""
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Tuple, Union
import logging

from .errors import InvalidAmount
from .normalize import parse_dutch_decimal
from .rows import Row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Skip:
    row: Row
    reason: str


@dataclass(frozen=True)
class HeaderRow:
    row: Row
    fields: Tuple[str, ...]


@dataclass(frozen=True)
class ExchangeRateAnnotation:
    row: Row
    currency: str
    rate: Decimal


@dataclass(frozen=True)
class TransactionCandidate:
    row: Row


RowOutcome = Union[Skip, HeaderRow, ExchangeRateAnnotation, TransactionCandidate]


def _compile(patterns: List[str]) -> List[re.Pattern]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


class RowClassifier:
    """Applies the template's ordered skip rules to rows."""

    def __init__(self, template: Dict[str, Any]):
        classification = template.get('classification', {})
        transactions = template.get('transactions', {})

        self.skip_patterns = _compile(classification.get('skip_patterns', []))
        self.page_patterns = _compile(classification.get('page_patterns', []))
        self.header_patterns = _compile(classification.get('header_patterns', []))

        cardholder = classification.get('cardholder_name', {})
        # case-sensitive: the heuristic is "all caps"
        self.cardholder_re = re.compile(cardholder.get('pattern', r'^[A-Z][A-Z.\s-]+$'))
        self.cardholder_min = cardholder.get('min_length', 4)
        self.cardholder_max = cardholder.get('max_length', 39)

        self.exchange_rate_re = re.compile(
            transactions.get('exchange_rate_pattern', r'Wisselkoers\s+([A-Z]{3})\s+([\d.,]+)')
        )

    def is_cardholder_name(self, text: str) -> bool:
        """
        Check if a line is a cardholder name like "F. VELHO DUTRA".

        Short all-caps merchant-only lines match as well and are dropped.
        """
        trimmed = text.strip()
        return (bool(self.cardholder_re.match(trimmed))
                and self.cardholder_min <= len(trimmed) <= self.cardholder_max)

    def classify(self, row: Row) -> RowOutcome:
        text = row.text

        match = self.exchange_rate_re.search(text)
        if match:
            try:
                rate = parse_dutch_decimal(match.group(2))
            except InvalidAmount:
                logger.warning(f"Unreadable exchange rate in row: {text!r}")
                return Skip(row, 'exchange_rate')
            return ExchangeRateAnnotation(row, match.group(1), rate)

        if any(p.search(text) for p in self.skip_patterns):
            return Skip(row, 'boilerplate')

        if self.is_cardholder_name(text):
            return Skip(row, 'cardholder_name')

        if any(p.search(text) for p in self.header_patterns):
            return HeaderRow(row, tuple(row.texts))

        if any(p.search(text) for p in self.page_patterns):
            return Skip(row, 'page_number')

        return TransactionCandidate(row)

    def classify_all(self, rows: List[Row]) -> List[RowOutcome]:
        """Classify rows in order."""
        return [self.classify(row) for row in rows]
