from __future__ import annotations

from typing import Iterable, List, Optional

from ..logging_setup import get_logger
from .document import Mt940Document
from .models import Mt940Balance, Mt940Transaction
from .reconcile import reconcile

logger = get_logger(__name__)


class Mt940DocumentBuilder:
    """Fluent accumulator for one statement; ``build()`` fills in the missing balance."""

    def __init__(
        self,
        account_id: str = "",
        *,
        reference_id: str = "COMMON",
        statement_number: str = "00000",
    ):
        self.account_id = account_id
        self.reference_id = reference_id
        self.statement_number = statement_number
        self._transactions: List[Mt940Transaction] = []
        self._opening: Optional[Mt940Balance] = None
        self._closing: Optional[Mt940Balance] = None

    def set_account_id(self, account_id: str) -> "Mt940DocumentBuilder":
        self.account_id = account_id
        return self

    def set_reference_id(self, reference_id: str) -> "Mt940DocumentBuilder":
        self.reference_id = reference_id
        return self

    def set_statement_number(self, statement_number: str) -> "Mt940DocumentBuilder":
        self.statement_number = statement_number
        return self

    def set_opening_balance(self, balance: Optional[Mt940Balance]) -> "Mt940DocumentBuilder":
        self._opening = balance
        return self

    def set_closing_balance(self, balance: Optional[Mt940Balance]) -> "Mt940DocumentBuilder":
        self._closing = balance
        return self

    def add_transaction(self, transaction: Mt940Transaction) -> "Mt940DocumentBuilder":
        if not isinstance(transaction, Mt940Transaction):
            raise TypeError(f"Expected Mt940Transaction, got {type(transaction).__name__}")
        self._transactions.append(transaction)
        return self

    def add_transactions(self, transactions: Iterable[Mt940Transaction]) -> "Mt940DocumentBuilder":
        for txn in transactions:
            self.add_transaction(txn)
        return self

    @property
    def transactions(self) -> tuple[Mt940Transaction, ...]:
        return tuple(self._transactions)

    def build(self) -> Mt940Document:
        balances = reconcile(self._transactions, opening=self._opening, closing=self._closing)
        document = Mt940Document(
            account_id=self.account_id,
            reference_id=self.reference_id,
            statement_number=self.statement_number,
            opening_balance=balances.opening,
            closing_balance=balances.closing,
            transactions=tuple(self._transactions),
        )
        logger.info(
            "mt940_document_built",
            account_id=document.account_id,
            transactions=len(document.transactions),
            opening=str(document.opening_balance),
            closing=str(document.closing_balance),
        )
        return document
