"""
Pydantic models for ICS credit card statement data.
"""
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Direction(str, Enum):
    """Booking direction as printed in the last column of a transaction row."""
    DEBIT = "Af"
    CREDIT = "Bij"


class TextItem(BaseModel):
    """A positioned text fragment. ``y`` is measured from the bottom of the page."""
    model_config = ConfigDict(frozen=True)

    text: str
    x: float
    y: float
    page: int
    width: float = 0.0


class StatementHeader(BaseModel):
    """Statement level fields."""
    model_config = ConfigDict(frozen=True)

    statement_date: date
    customer_number: str = Field(pattern=r"^\d{11}$")
    total_new_expenses: Decimal
    debit_iban: str = ""
    estimated_debit_date: date


class Transaction(BaseModel):
    """Individual card transaction."""
    transaction_date: date
    booking_date: date
    description: str
    city: str = ""
    country: str = ""  # 3-letter country code or empty
    foreign_amount: Optional[Decimal] = None
    foreign_currency: Optional[str] = None
    exchange_rate: Optional[Decimal] = None  # set from the following "Wisselkoers" line
    amount_eur: Decimal
    direction: Direction

    @field_validator('country')
    @classmethod
    def validate_country(cls, v):
        if v and (len(v) != 3 or not v.isupper()):
            raise ValueError(f"Country must be a 3-letter code: {v!r}")
        return v

    @field_validator('foreign_currency')
    @classmethod
    def validate_foreign_currency(cls, v):
        if v is not None and (len(v) != 3 or not v.isupper()):
            raise ValueError(f"Currency must be a 3-letter code: {v!r}")
        return v

    @property
    def is_debit(self) -> bool:
        return self.direction == Direction.DEBIT


class ParseResult(BaseModel):
    """Complete result of parsing one statement."""
    header: StatementHeader
    transactions: List[Transaction]
    warnings: List[str] = Field(default_factory=list)
    statement_id: str = Field(pattern=r"^\d{11}_\d{4}-\d{2}$")

    @property
    def debit_total(self) -> Decimal:
        """Sum of all debit ("Af") amounts."""
        return sum((t.amount_eur for t in self.transactions if t.is_debit), Decimal('0.00'))

    def to_import_request(self) -> Dict[str, Any]:
        """
        Build the payload expected by the statement import call.

        Dates are ISO-8601 strings and amounts plain numbers, keyed the way
        the import endpoint expects them.

        Raises:
            ValueError: if the statement has no transactions to import
        """
        if not self.transactions:
            raise ValueError("At least one transaction is required for import")

        header = self.header
        return {
            "statementId": self.statement_id,
            "statementDate": header.statement_date.isoformat(),
            "customerNumber": header.customer_number,
            "totalNewExpenses": float(header.total_new_expenses),
            "estimatedDebitDate": header.estimated_debit_date.isoformat(),
            "debitIban": header.debit_iban,
            "transactions": [
                {
                    "transactionDate": t.transaction_date.isoformat(),
                    "bookingDate": t.booking_date.isoformat(),
                    "description": t.description,
                    "city": t.city,
                    "country": t.country,
                    "foreignAmount": float(t.foreign_amount) if t.foreign_amount is not None else None,
                    "foreignCurrency": t.foreign_currency,
                    "exchangeRate": float(t.exchange_rate) if t.exchange_rate is not None else None,
                    "amountEur": float(t.amount_eur),
                    "direction": t.direction.value,
                }
                for t in self.transactions
            ],
        }
