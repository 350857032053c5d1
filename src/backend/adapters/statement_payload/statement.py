from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from common.interchange.mt940 import (
    Mt940Balance,
    Mt940Document,
    Mt940DocumentBuilder,
    Mt940Transaction,
)
from common.interchange.mt940.models import REFERENCE_MAX_LENGTH


class StatementPayloadError(ValueError):
    pass


def statement_from_payload(payload: dict[str, Any]) -> Mt940Document:
    """
    Build a reconciled Mt940Document from a pre-parsed statement payload.

    Expected fields:
      - payload["account_id"]
      - payload["reference_id"], payload["statement_number"] (optional)
      - payload["opening_balance"] and/or payload["closing_balance"]
        as {"direction", "date", "currency", "amount"}
      - payload["transactions"]: list of
        {"credit_debit", "amount", "date", "valuta_date"?, "reference"?, "purpose"?}

    Notes:
    - Directions accept "C"/"D" as well as "CREDIT"/"DEBIT".
    - Amounts may be strings or numbers; they go through Decimal(str(...)).
    - The missing balance endpoint is derived from the transactions.
    """
    if not isinstance(payload, dict):
        raise StatementPayloadError("Statement payload must be a JSON object.")

    account_id = str(payload.get("account_id") or "").strip()
    if not account_id:
        raise StatementPayloadError("Missing account_id in statement payload.")

    raw_transactions = payload.get("transactions") or []
    if not isinstance(raw_transactions, list):
        raise StatementPayloadError("transactions must be a list.")

    builder = Mt940DocumentBuilder(
        account_id,
        reference_id=str(payload.get("reference_id") or "COMMON"),
        statement_number=str(payload.get("statement_number") or "00000"),
    )
    builder.set_opening_balance(_parse_balance(payload.get("opening_balance"), "opening_balance"))
    builder.set_closing_balance(_parse_balance(payload.get("closing_balance"), "closing_balance"))
    for idx, raw in enumerate(raw_transactions):
        builder.add_transaction(_parse_transaction(raw, idx))
    return builder.build()


def _parse_balance(raw: Any, key: str) -> Mt940Balance | None:
    if raw in (None, {}):
        return None
    if not isinstance(raw, dict):
        raise StatementPayloadError(f"{key} must be an object.")
    return Mt940Balance(
        direction=_require(raw, "direction", key),
        date=_parse_date(_require(raw, "date", key)),
        currency=str(_require(raw, "currency", key)).strip().upper(),
        amount=_parse_decimal(_require(raw, "amount", key)),
    )


def _parse_transaction(raw: Any, idx: int) -> Mt940Transaction:
    key = f"transactions[{idx}]"
    if not isinstance(raw, dict):
        raise StatementPayloadError(f"{key} must be an object.")
    fields: dict[str, Any] = {
        "credit_debit": _require(raw, "credit_debit", key),
        "amount": _parse_decimal(_require(raw, "amount", key)),
        "date": _parse_date(_require(raw, "date", key)),
        "valuta_date": _parse_date(raw.get("valuta_date")),
        "purpose": str(raw.get("purpose") or ""),
    }
    if raw.get("reference"):
        reference = str(raw["reference"])
        if len(reference) > REFERENCE_MAX_LENGTH:
            raise StatementPayloadError(
                f"reference in {key} exceeds {REFERENCE_MAX_LENGTH} characters: {reference!r}"
            )
        fields["reference"] = reference
    return Mt940Transaction(**fields)


def _require(raw: dict[str, Any], field: str, key: str) -> Any:
    value = raw.get(field)
    if value in (None, ""):
        raise StatementPayloadError(f"Missing {field} in {key}.")
    return value


def _parse_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise StatementPayloadError(f"Invalid date: {value!r}") from exc


def _parse_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise StatementPayloadError(f"Invalid amount: {value!r}") from exc
