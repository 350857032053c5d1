import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from datetime import date, datetime

import pytest

from common.interchange.datev import DatevMetaHeader, MetaHeaderLine
from common.interchange.models import DataLine, HeaderLine
from common.interchange.mt940 import Mt940Balance, Mt940Transaction


@pytest.fixture
def statement_date() -> date:
    return date(2025, 3, 31)


@pytest.fixture
def make_header():
    def _make(*names: str) -> HeaderLine:
        return HeaderLine.from_values(names)

    return _make


@pytest.fixture
def make_row():
    def _make(*values: str) -> DataLine:
        return DataLine.from_values(values)

    return _make


@pytest.fixture
def make_meta_header():
    def _make(**overrides) -> MetaHeaderLine:
        fields = {
            "consultant_number": 29098,
            "client_number": 55003,
            "created_at": datetime(2025, 4, 1, 12, 30, 0),
        }
        fields.update(overrides)
        return DatevMetaHeader(**fields).to_line()

    return _make


@pytest.fixture
def make_balance(statement_date):
    def _make(amount, direction: str = "C", *, currency: str = "EUR", on=None) -> Mt940Balance:
        return Mt940Balance(
            direction=direction,
            date=on or statement_date,
            currency=currency,
            amount=amount,
        )

    return _make


@pytest.fixture
def make_transaction(statement_date):
    def _make(amount, credit_debit: str = "C", **kwargs) -> Mt940Transaction:
        kwargs.setdefault("date", statement_date)
        return Mt940Transaction(credit_debit=credit_debit, amount=amount, **kwargs)

    return _make
