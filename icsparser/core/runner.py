"""
End-to-end parsing orchestration.
"""
from decimal import Decimal
from typing import Dict, Any, List, Optional
import logging

from .classifier import (
    ExchangeRateAnnotation, HeaderRow, RowClassifier, Skip, TransactionCandidate,
)
from .detectors import TemplateDetector, DEFAULT_TEMPLATE_ID
from .errors import UnsupportedStatement
from .header import HeaderExtractor, build_statement_id
from .loader import PDFLoader, PDFSource
from .rows import group_into_rows, DEFAULT_Y_TOLERANCE
from .transactions import attach_exchange_rate, parse_transaction_row
from .validation import validate_total, DEFAULT_TOLERANCE
from ..models.schema import ParseResult, TextItem, Transaction

logger = logging.getLogger(__name__)


class StatementParser:
    """Main parser class that orchestrates the entire parsing process."""

    def __init__(self, template_id: Optional[str] = None, verbose: bool = False,
                 detector: Optional[TemplateDetector] = None):
        self.detector = detector or TemplateDetector()
        self.template_id = template_id
        # resolved lazily when auto-detecting
        self.template = self.detector.get_template(template_id) if template_id else None

        if verbose:
            logging.basicConfig(level=logging.DEBUG)

    def parse(self, source: PDFSource) -> ParseResult:
        """
        Parse a PDF into a ParseResult.

        Args:
            source: PDF path or raw bytes

        Returns:
            ParseResult
        """
        loader_options = self._loader_options()
        with PDFLoader(source, **loader_options) as loader:
            items = loader.text_items()

        if not items:
            raise UnsupportedStatement("No text found in PDF")

        return self.parse_items(items)

    def parse_items(self, items: List[TextItem]) -> ParseResult:
        """
        Parse already extracted text fragments.

        Args:
            items: Text fragments of all pages

        Returns:
            ParseResult
        """
        template = self._resolve_template(items)

        y_tolerance = template.get('rows', {}).get('y_tolerance', DEFAULT_Y_TOLERANCE)
        rows = group_into_rows(items, y_tolerance)

        header = HeaderExtractor(template).extract(rows)
        statement_year = header.statement_date.year
        statement_month = header.statement_date.month - 1

        transactions = self._extract_transactions(rows, template, statement_year, statement_month)
        logger.info(f"Parsed {len(transactions)} transactions")

        tolerance = Decimal(str(template.get('validation', {}).get('total_tolerance', DEFAULT_TOLERANCE)))
        warnings = validate_total(transactions, header.total_new_expenses, tolerance)

        return ParseResult(
            header=header,
            transactions=transactions,
            warnings=warnings,
            statement_id=build_statement_id(header),
        )

    def _extract_transactions(self, rows, template: Dict[str, Any],
                              statement_year: int, statement_month: int) -> List[Transaction]:
        config = template.get('transactions', {})
        country_codes = frozenset(config.get('country_codes', []))
        excluded = config.get('exclude_descriptions', [])
        classifier = RowClassifier(template)

        transactions: List[Transaction] = []
        last_index: Optional[int] = None

        for outcome in classifier.classify_all(rows):
            if isinstance(outcome, (Skip, HeaderRow)):
                continue

            if isinstance(outcome, ExchangeRateAnnotation):
                if last_index is None:
                    logger.warning(f"Exchange rate without preceding transaction dropped: {outcome.row.text!r}")
                else:
                    transactions = attach_exchange_rate(transactions, last_index, outcome.rate)
                continue

            if isinstance(outcome, TransactionCandidate):
                tx = parse_transaction_row(outcome.row.texts, statement_year, statement_month, country_codes)
                if tx is None:
                    logger.debug(f"Not a transaction row: {outcome.row.text!r}")
                    continue
                if any(text in tx.description for text in excluded):
                    logger.debug(f"Excluded row: {tx.description}")
                    continue
                transactions.append(tx)
                last_index = len(transactions) - 1
                continue

            raise TypeError(f"Unhandled row outcome: {outcome!r}")

        return transactions

    def _loader_options(self) -> Dict[str, Any]:
        template = self.template or self.detector.templates.get(DEFAULT_TEMPLATE_ID, {})
        return template.get('loader', {})

    def _resolve_template(self, items: List[TextItem]) -> Dict[str, Any]:
        if self.template is not None:
            return self.template

        template_id = self.detector.match_rows(group_into_rows(items))
        if not template_id:
            raise UnsupportedStatement("Document does not look like a supported ICS statement")
        return self.detector.get_template(template_id)


def parse_statement(source: PDFSource, template_id: Optional[str] = None,
                    verbose: bool = False) -> ParseResult:
    """
    Parse an ICS credit card statement PDF.

    Args:
        source: PDF path or raw bytes
        template_id: Template ID to use, detected when omitted
        verbose: Enable verbose logging

    Returns:
        ParseResult
    """
    parser = StatementParser(template_id, verbose)
    return parser.parse(source)
