"""Opening/closing balance reconciliation for MT940 statements.

Balances are converted to one signed Decimal (credit positive, debit
negative) for the arithmetic and back to direction + magnitude at the end.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ..exceptions import BalanceMismatchError, MissingBalanceError
from ..logging_setup import get_logger
from .models import Mt940Balance, Mt940Transaction, quantize_amount

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReconciledBalances:
    opening: Mt940Balance
    closing: Mt940Balance


def net_movement(transactions: Iterable[Mt940Transaction]) -> Decimal:
    total = Decimal("0")
    for txn in transactions:
        total += txn.signed_amount
    return quantize_amount(total)


def closing_from_opening(opening: Mt940Balance, transactions: Iterable[Mt940Transaction]) -> Mt940Balance:
    """Opening balance plus the signed movement.

    With no transactions the opening balance is returned as is, so a 0.00
    debit stays a debit. Any other zero result is reported as credit.
    """
    transactions = list(transactions)
    if not transactions:
        return opening
    total = opening.signed_amount + net_movement(transactions)
    return Mt940Balance.from_signed(total, date=opening.date, currency=opening.currency)


def opening_from_closing(closing: Mt940Balance, transactions: Iterable[Mt940Transaction]) -> Mt940Balance:
    transactions = list(transactions)
    if not transactions:
        return closing
    total = closing.signed_amount - net_movement(transactions)
    return Mt940Balance.from_signed(total, date=closing.date, currency=closing.currency)


def balances_match(expected: Mt940Balance, actual: Mt940Balance) -> bool:
    """Compare signed values and currency; dates and the sign flag of zero are ignored."""
    return expected.currency == actual.currency and expected.signed_amount == actual.signed_amount


def reconcile(
    transactions: Iterable[Mt940Transaction],
    *,
    opening: Optional[Mt940Balance] = None,
    closing: Optional[Mt940Balance] = None,
) -> ReconciledBalances:
    """Derive the missing balance endpoint, or verify both when both are given."""
    if opening is None and closing is None:
        raise MissingBalanceError()

    transactions = list(transactions)

    if opening is None:
        opening = opening_from_closing(closing, transactions)
        logger.debug("balance_derived", endpoint="opening", balance=str(opening))
        return ReconciledBalances(opening=opening, closing=closing)

    expected = closing_from_opening(opening, transactions)
    if closing is None:
        logger.debug("balance_derived", endpoint="closing", balance=str(expected))
        return ReconciledBalances(opening=opening, closing=expected)

    if not balances_match(expected, closing):
        logger.warning(
            "balance_mismatch",
            opening=str(opening),
            expected_closing=str(expected),
            actual_closing=str(closing),
            transactions=len(transactions),
        )
        raise BalanceMismatchError(expected, closing)
    return ReconciledBalances(opening=opening, closing=closing)
