"""MT940 statement models, balance reconciliation and rendering."""

from .builder import Mt940DocumentBuilder
from .document import Mt940Document
from .models import CreditDebit, Mt940Balance, Mt940Transaction, format_amount, quantize_amount
from .reconcile import (
    ReconciledBalances,
    balances_match,
    closing_from_opening,
    net_movement,
    opening_from_closing,
    reconcile,
)

__all__ = [
    "CreditDebit",
    "Mt940Balance",
    "Mt940Document",
    "Mt940DocumentBuilder",
    "Mt940Transaction",
    "ReconciledBalances",
    "balances_match",
    "closing_from_opening",
    "format_amount",
    "net_movement",
    "opening_from_closing",
    "quantize_amount",
    "reconcile",
]
