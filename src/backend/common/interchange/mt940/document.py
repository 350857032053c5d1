from __future__ import annotations

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..exceptions import BalanceMismatchError
from .models import Mt940Balance, Mt940Transaction
from .reconcile import balances_match, closing_from_opening

CRLF = "\r\n"


class Mt940Document(BaseModel):
    """One reconciled MT940 statement.

    Construction fails with ``BalanceMismatchError`` unless the closing
    balance equals the opening balance plus the signed transactions.
    """

    model_config = ConfigDict(frozen=True)

    account_id: str = Field(min_length=1)
    reference_id: str = "COMMON"
    statement_number: str = "00000"
    opening_balance: Mt940Balance
    closing_balance: Mt940Balance
    transactions: Tuple[Mt940Transaction, ...] = ()

    @model_validator(mode="after")
    def _balances_reconcile(self) -> "Mt940Document":
        expected = closing_from_opening(self.opening_balance, self.transactions)
        if not balances_match(expected, self.closing_balance):
            raise BalanceMismatchError(expected, self.closing_balance)
        return self

    @property
    def currency(self) -> str:
        return self.opening_balance.currency

    def to_mt940_lines(self) -> List[str]:
        lines = [
            f":20:{self.reference_id}",
            f":25:{self.account_id}",
            f":28C:{self.statement_number}",
            f":60F:{self.opening_balance.to_mt940()}",
        ]
        for txn in self.transactions:
            lines.extend(txn.to_mt940_lines())
        lines.append(f":62F:{self.closing_balance.to_mt940()}")
        lines.append("-")
        return lines

    def to_mt940(self) -> str:
        return CRLF.join(self.to_mt940_lines()) + CRLF
