"""
Cross-validation of parsed transactions against the statement total.
"""
from decimal import Decimal
from typing import List
import logging

from ..models.schema import Transaction

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = Decimal('0.02')


def validate_total(transactions: List[Transaction], total: Decimal,
                   tolerance: Decimal = DEFAULT_TOLERANCE) -> List[str]:
    """
    Compare the sum of debit transactions with the stated total.

    Args:
        transactions: Parsed transactions
        total: Total new expenses from the statement header
        tolerance: Largest difference that is still accepted

    Returns:
        List of warnings, empty when the figures agree
    """
    debit_sum = sum((t.amount_eur for t in transactions if t.is_debit), Decimal('0.00'))
    diff = abs(debit_sum - total)

    if diff <= tolerance:
        return []

    message = (f"Sum of parsed transactions (€{debit_sum:.2f}) differs from "
               f"statement total (€{total:.2f}) by €{diff:.2f}")
    logger.warning(message)
    return [message]
