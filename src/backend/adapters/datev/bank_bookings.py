from __future__ import annotations

from datetime import datetime
from typing import Any

from common.interchange.config import ColumnWidthConfig, CsvDialect, DatevExportSettings
from common.interchange.datev import (
    BOOKING_BATCH_FIELDS,
    DatevCategory,
    DatevDocument,
    DatevDocumentBuilder,
    DatevMetaHeader,
    booking_batch_widths,
)
from common.interchange.datev.booking_batch import (
    ACCOUNT,
    AMOUNT,
    BOOKING_TEXT,
    CONTRA_ACCOUNT,
    CURRENCY,
    DEBIT_CREDIT,
    VOUCHER_DATE,
    VOUCHER_FIELD_1,
)
from common.interchange.models import DataLine
from common.interchange.mt940 import Mt940Document, Mt940Transaction

_QUOTED_COLUMNS = {DEBIT_CREDIT, CURRENCY, VOUCHER_FIELD_1, BOOKING_TEXT}
_INDEX = {name: idx for idx, name in reversed(list(enumerate(BOOKING_BATCH_FIELDS)))}


def booking_row(txn: Mt940Transaction, settings: DatevExportSettings, currency: str) -> DataLine:
    """
    One Buchungsstapel row for a bank transaction.

    Konto is the contra account and Gegenkonto the bank account, so the
    statement's credit/debit flag maps directly onto Haben/Soll.
    """
    values: dict[str, str] = {
        AMOUNT: f"{txn.amount:f}".replace(".", ","),
        DEBIT_CREDIT: txn.credit_debit.to_datev_code(),
        CURRENCY: currency,
        ACCOUNT: settings.contra_account,
        CONTRA_ACCOUNT: settings.bank_account,
        VOUCHER_DATE: txn.date.strftime("%d%m"),
        VOUCHER_FIELD_1: txn.reference if txn.reference != "NONREF" else "",
        BOOKING_TEXT: " ".join(txn.purpose.split()),
    }
    cells = [""] * len(BOOKING_BATCH_FIELDS)
    quoted = [False] * len(BOOKING_BATCH_FIELDS)
    for name, value in values.items():
        idx = _INDEX[name]
        cells[idx] = value
        quoted[idx] = name in _QUOTED_COLUMNS
    return DataLine.from_values(cells, quoted=quoted)


def booking_batch_from_statement(
    statement: Mt940Document,
    settings: DatevExportSettings,
    *,
    created_at: datetime | None = None,
    column_widths: ColumnWidthConfig | None = None,
    dialect: CsvDialect | None = None,
) -> DatevDocument:
    """
    Build a DATEV booking batch (category 21) from a reconciled statement.

    Notes:
    - The booking batch column limits always apply; ``column_widths`` rules
      (e.g. from an export profile) are layered on top of them.
    - The meta-header period spans the first and last transaction dates, or
      the balance dates for a statement without transactions.
    """
    widths = booking_batch_widths()
    if column_widths is not None:
        _merge_widths(widths, column_widths)

    dates = [txn.date for txn in statement.transactions] or [
        statement.opening_balance.date,
        statement.closing_balance.date,
    ]
    meta = DatevMetaHeader(
        category=DatevCategory.BOOKING_BATCH,
        created_at=created_at or datetime.now(),
        consultant_number=settings.consultant_number,
        client_number=settings.client_number,
        fiscal_year_start=settings.fiscal_year_start or min(dates).replace(month=1, day=1),
        account_length=settings.account_length,
        date_from=min(dates),
        date_to=max(dates),
        label=settings.label,
        currency=settings.currency,
    )

    builder = DatevDocumentBuilder(DatevCategory.BOOKING_BATCH, dialect, column_widths=widths)
    builder.set_meta_header(meta)
    for txn in statement.transactions:
        builder.add_row(booking_row(txn, settings, statement.currency))
    return builder.build()


def _merge_widths(target: ColumnWidthConfig, overrides: ColumnWidthConfig) -> None:
    rules: dict[Any, Any] = {**overrides.by_position, **overrides.by_name}
    for column, rule in rules.items():
        target.set_rule(column, rule)
    if overrides.default is not None:
        target.set_default_rule(overrides.default)
