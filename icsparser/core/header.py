"""
Statement header extraction.

Statement date, customer number, IBAN and debit date are read with regexes
over the full statement text. The new-expenses total sits in a label/value
table, so it is read from the row below its label.
"""
import re
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from .anchors import find_anchor, next_row
from .errors import MissingRequiredField, StatementParseError
from .normalize import FULL_DATE_PATTERN, parse_dutch_amount, parse_dutch_full_date
from .rows import Row
from ..models.schema import StatementHeader

logger = logging.getLogger(__name__)


def _pattern(raw: str) -> re.Pattern:
    return re.compile(raw.replace('{full_date}', FULL_DATE_PATTERN))


class HeaderExtractor:
    """Extracts the statement header fields described by a template."""

    def __init__(self, template: Dict[str, Any]):
        self.config = template.get('header', {})

    def extract(self, rows: List[Row], full_text: Optional[str] = None) -> StatementHeader:
        """
        Extract the statement header.

        Args:
            rows: Rows of the whole statement in reading order
            full_text: Concatenated statement text; built from rows if omitted

        Returns:
            StatementHeader

        Raises:
            MissingRequiredField: statement date, customer number or new
                expenses total not found
        """
        if full_text is None:
            full_text = ' '.join(row.text for row in rows)

        statement_date = self.extract_statement_date(full_text)
        customer_number = self.extract_customer_number(full_text)
        total_new_expenses = self.extract_total_new_expenses(rows)
        debit_iban = self.extract_debit_iban(full_text)
        estimated_debit_date = self.extract_estimated_debit_date(full_text, statement_date)

        logger.info(f"Statement {statement_date} for customer {customer_number}, "
                    f"new expenses €{total_new_expenses}")

        return StatementHeader(
            statement_date=statement_date,
            customer_number=customer_number,
            total_new_expenses=total_new_expenses,
            debit_iban=debit_iban,
            estimated_debit_date=estimated_debit_date,
        )

    def extract_statement_date(self, full_text: str) -> date:
        patterns = self.config.get('statement_date', {}).get('patterns', [])
        for raw in patterns:
            match = _pattern(raw).search(full_text)
            if match:
                return parse_dutch_full_date(match.group(1))
        raise MissingRequiredField('statement_date')

    def extract_customer_number(self, full_text: str) -> str:
        raw = self.config.get('customer_number', {}).get('pattern', r'ICS-klantnummer\s+.*?(\d{11})')
        match = _pattern(raw).search(full_text)
        if not match:
            raise MissingRequiredField('customer_number')
        return match.group(1)

    def extract_total_new_expenses(self, rows: List[Row]) -> Decimal:
        """
        Read the new expenses total from the row below its label.

        The values row holds four "€ <amount> <Af|Bij>" columns and the
        total is taken by position, so a reordered table yields a wrong
        figure rather than an error.
        """
        config = self.config.get('total_new_expenses', {})
        label = config.get('label', 'Totaal nieuwe uitgaven')
        amount_re = re.compile(config.get('amount_pattern', r'€\s*([\d.,]+)'))
        amount_index = config.get('amount_index', 2)

        anchor = find_anchor(rows, label, config.get('fuzzy_threshold', 90))
        if not anchor:
            raise MissingRequiredField('total_new_expenses')

        values_row = next_row(rows, anchor)
        if values_row is None:
            raise MissingRequiredField('total_new_expenses')

        amounts = amount_re.findall(values_row.text)
        if len(amounts) <= amount_index:
            logger.debug(f"Values row has {len(amounts)} amounts: {values_row.text!r}")
            raise MissingRequiredField('total_new_expenses')

        total = parse_dutch_amount(amounts[amount_index])
        if total == 0:
            raise MissingRequiredField('total_new_expenses')
        return total

    def extract_debit_iban(self, full_text: str) -> str:
        raw = self.config.get('debit_iban', {}).get('pattern', r'(?i)bankrekening\s+(NL\w+)')
        match = _pattern(raw).search(full_text)
        return match.group(1) if match else ''

    def extract_estimated_debit_date(self, full_text: str, statement_date: date) -> date:
        """Debit date, or the first day of the statement month when it cannot be read."""
        fallback = statement_date.replace(day=1)
        raw = self.config.get('estimated_debit_date', {}).get('pattern')
        if not raw:
            return fallback

        match = _pattern(raw).search(full_text)
        if not match:
            logger.debug("No estimated debit date found, using first of statement month")
            return fallback

        try:
            return parse_dutch_full_date(match.group(1))
        except StatementParseError as e:
            logger.debug(f"Unreadable estimated debit date, using first of statement month: {e}")
            return fallback


def build_statement_id(header: StatementHeader) -> str:
    """Statement id like "78179360017_2026-01"."""
    return f"{header.customer_number}_{header.statement_date:%Y-%m}"
