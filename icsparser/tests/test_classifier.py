"""
Tests for row classification.
"""
import pytest
from decimal import Decimal

from ..core.classifier import (
    ExchangeRateAnnotation, HeaderRow, RowClassifier, Skip, TransactionCandidate,
)


class TestRowClassifier:

    @pytest.fixture
    def classifier(self, template):
        return RowClassifier(template)

    def test_transaction_row_is_candidate(self, classifier, make_row):
        row = make_row(["06 jan.", "07 jan.", "ALBERT HEIJN", "AMSTERDAM", "NLD", "36,00", "Af"])

        outcome = classifier.classify(row)

        assert isinstance(outcome, TransactionCandidate)
        assert outcome.row is row

    def test_exchange_rate_line(self, classifier, make_row):
        outcome = classifier.classify(make_row(["Wisselkoers USD", "1,16644"]))

        assert isinstance(outcome, ExchangeRateAnnotation)
        assert outcome.currency == "USD"
        assert outcome.rate == Decimal("1.16644")

    @pytest.mark.parametrize("texts", [
        ["Uw Card met als laatste vier cijfers 1234"],
        ["International Card Services B.V."],
        ["Postbus 23225"],
        ["1112 DS Diemen"],
        ["Telefoon 020 - 660 06 66"],
        ["www.icscards.nl"],
        ["BIC: ABNANL2A"],
        ["E123456789012345"],
        ["Minimaal te betalen", "€ 50,00"],
        ["Dit product valt onder het depositogarantiestelsel"],
    ])
    def test_boilerplate_skipped(self, classifier, make_row, texts):
        outcome = classifier.classify(make_row(texts))

        assert isinstance(outcome, Skip)
        assert outcome.reason == 'boilerplate'

    @pytest.mark.parametrize("texts", [
        ["Datum transactie", "Datum boeking", "Omschrijving"],
        ["transactie", "boeking"],
        ["Vorig openstaand saldo", "Totaal nieuwe uitgaven"],
        ["€ 692,52", "Af", "€ 692,52", "Bij", "€ 712,40", "Af", "€ 712,40", "Af"],
        ["Bedrag in vreemde valuta", "Bedrag in euro's"],
    ])
    def test_table_captions_are_header_rows(self, classifier, make_row, texts):
        outcome = classifier.classify(make_row(texts))

        assert isinstance(outcome, HeaderRow)
        assert outcome.fields == tuple(texts)

    @pytest.mark.parametrize("texts", [["1"], ["12 "], ["Bladnummer", "2 van 2"], ["Volgnummer 3"]])
    def test_page_numbers_skipped(self, classifier, make_row, texts):
        outcome = classifier.classify(make_row(texts))

        assert isinstance(outcome, Skip)
        assert outcome.reason == 'page_number'

    def test_cardholder_name_skipped(self, classifier, make_row):
        outcome = classifier.classify(make_row(["F. VELHO DUTRA"]))

        assert isinstance(outcome, Skip)
        assert outcome.reason == 'cardholder_name'

    def test_cardholder_heuristic_length_bounds(self, classifier):
        assert not classifier.is_cardholder_name("ABC")
        assert classifier.is_cardholder_name("ABCD")
        assert classifier.is_cardholder_name("A" * 39)
        assert not classifier.is_cardholder_name("A" * 40)
        assert not classifier.is_cardholder_name("J Smith")

    def test_short_all_caps_merchant_line_is_dropped(self, classifier, make_row):
        # known limitation of the cardholder heuristic
        outcome = classifier.classify(make_row(["SHELL", "UTRECHT"]))

        assert isinstance(outcome, Skip)

    def test_unreadable_exchange_rate_skipped(self, classifier, make_row):
        outcome = classifier.classify(make_row(["Wisselkoers USD", ","]))

        assert isinstance(outcome, Skip)
        assert outcome.reason == 'exchange_rate'

    def test_classify_all_keeps_order(self, classifier, make_row):
        rows = [make_row(["1"], y=700), make_row(["Wisselkoers GBP", "0,86"], y=680)]

        outcomes = classifier.classify_all(rows)

        assert [type(o) for o in outcomes] == [Skip, ExchangeRateAnnotation]
