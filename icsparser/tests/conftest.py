"""
Shared fixtures: synthetic ICS statements as positioned text fragments.
"""
import pytest

from ..core.detectors import TemplateDetector
from ..core.rows import Row
from ..core.runner import StatementParser
from ..models.schema import TextItem


def build_items(pages, top=800.0, line_gap=20.0, col_gap=90.0, left=40.0):
    """
    Lay out lines of fragments on pages.

    Args:
        pages: list of pages, each a list of lines, each a list of fragment texts

    Returns:
        TextItems, one per fragment
    """
    items = []
    for page_num, lines in enumerate(pages, 1):
        for line_num, line in enumerate(lines):
            y = top - line_num * line_gap
            for col, text in enumerate(line):
                items.append(TextItem(
                    text=text,
                    x=left + col * col_gap,
                    y=y,
                    page=page_num,
                    width=len(text) * 4.5
                ))
    return items


def build_row(texts, page=1, y=500.0):
    """A single row from fragment texts."""
    return Row([
        TextItem(text=t, x=40.0 + i * 90.0, y=y, page=page, width=len(t) * 4.5)
        for i, t in enumerate(texts)
    ])


PAGE_ONE = [
    ["International Card Services B.V."],
    ["Datum", "ICS-klantnummer", "Volgnummer", "Bladnummer"],
    ["26 januari 2026", "78179360017", "1", "1 van 2"],
    ["Vorig openstaand saldo", "Totaal ontvangen betalingen", "Totaal nieuwe uitgaven", "Nieuw openstaand saldo"],
    ["€ 692,52", "Af", "€ 692,52", "Bij", "€ 712,40", "Af", "€ 712,40", "Af"],
    ["Datum transactie", "Datum boeking", "Omschrijving", "Bedrag in vreemde valuta", "Bedrag in euro's"],
    ["09 dec.", "09 dec.", "GEINCASSEERD VORIG SALDO", "692,52", "Bij"],
    ["Uw Card met als laatste vier cijfers 1234"],
    ["F. VELHO DUTRA"],
    ["30 dec.", "31 dec.", "ALBERT HEIJN 1234", "AMSTERDAM", "NLD", "36,00", "Af"],
    ["02 jan.", "03 jan.", "AMAZON.COM", "SEATTLE", "USA", "33,71", "USD", "28,90", "Af"],
    ["Wisselkoers USD", "1,16644"],
    ["1"],
]

PAGE_TWO = [
    ["Bladnummer", "2 van 2"],
    ["06 jan.", "07 jan.", "NS GROEP IZ NS REIZIGERS", "UTRECHT", "NLD", "647,50", "Af"],
    ["10 jan.", "10 jan.", "BOL.COM", "UTRECHT", "NLD", "12,99", "Bij"],
    ["De incasso vindt plaats omstreeks 28 januari 2026 van bankrekening NL91ABNA0417164300"],
    ["2"],
]


@pytest.fixture
def make_items():
    return build_items


@pytest.fixture
def make_row():
    return build_row


@pytest.fixture
def statement_pages():
    return [list(PAGE_ONE), list(PAGE_TWO)]


@pytest.fixture
def statement_items(statement_pages):
    return build_items(statement_pages)


@pytest.fixture
def template():
    return TemplateDetector().get_template("ics_nl_v1")


@pytest.fixture
def parsed_statement(statement_items):
    return StatementParser("ics_nl_v1").parse_items(statement_items)
