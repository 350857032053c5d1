from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import PlainTextResponse, Response

from adapters.datev import booking_batch_from_statement
from adapters.statement_payload import statement_from_payload
from common.interchange.config import ExportProfile
from common.interchange.exceptions import InterchangeError
from common.interchange.logging_setup import get_logger
from common.interchange.mt940 import Mt940Document


router = APIRouter(prefix="/interchange", tags=["interchange"])
logger = get_logger(__name__)


def _statement(payload: Any) -> Mt940Document:
    try:
        return statement_from_payload(payload)
    except InterchangeError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.post("/statements/mt940", response_class=PlainTextResponse)
def export_mt940(payload: dict[str, Any] = Body(...)):
    statement = _statement(payload)
    return PlainTextResponse(statement.to_mt940())


@router.post("/statements/reconcile")
def reconcile_statement(payload: dict[str, Any] = Body(...)):
    statement = _statement(payload)
    return {
        "account_id": statement.account_id,
        "opening_balance": statement.opening_balance.model_dump(mode="json"),
        "closing_balance": statement.closing_balance.model_dump(mode="json"),
        "transactions": len(statement.transactions),
    }


@router.post("/statements/datev")
def export_datev(
    statement: dict[str, Any] = Body(...),
    profile: dict[str, Any] | None = Body(None),
):
    try:
        export_profile = ExportProfile.model_validate(profile or {})
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    document = _statement(statement)
    try:
        datev = booking_batch_from_statement(
            document,
            export_profile.datev,
            column_widths=export_profile.column_widths,
            dialect=export_profile.dialect,
        )
    except InterchangeError as exc:
        logger.warning("datev_export_rejected", error_code=exc.error_code)
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc

    text = datev.to_string() + datev.line_terminator
    return Response(
        content=text.encode(datev.encoding, errors="replace"),
        media_type=f"text/csv; charset={datev.encoding}",
    )
