"""
ICS credit card statement parser

Reconstructs transactions from the positioned text of Dutch ICS (ABN AMRO)
credit card PDF statements using pdfplumber.
"""

__version__ = "1.0.0"
__author__ = "icsparser contributors"

from .core.runner import parse_statement, StatementParser
from .core.detectors import detect_template
from .core.errors import (
    StatementParseError, InvalidDateFormat, UnknownMonth, InvalidAmount,
    MissingRequiredField, UnsupportedStatement, TemplateNotFound,
)
from .models.schema import TextItem, StatementHeader, Transaction, ParseResult, Direction

__all__ = [
    "parse_statement",
    "StatementParser",
    "detect_template",
    "StatementParseError",
    "InvalidDateFormat",
    "UnknownMonth",
    "InvalidAmount",
    "MissingRequiredField",
    "UnsupportedStatement",
    "TemplateNotFound",
    "TextItem",
    "StatementHeader",
    "Transaction",
    "ParseResult",
    "Direction",
]
