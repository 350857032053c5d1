from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

AMOUNT_SCALE = Decimal("0.01")
PURPOSE_SEGMENT_LENGTH = 27
REFERENCE_MAX_LENGTH = 16


class CreditDebit(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"

    @property
    def sign(self) -> int:
        return 1 if self is CreditDebit.CREDIT else -1

    def to_mt940_code(self) -> str:
        return "C" if self is CreditDebit.CREDIT else "D"

    def to_datev_code(self) -> str:
        # Haben / Soll
        return "H" if self is CreditDebit.CREDIT else "S"

    @classmethod
    def from_mt940_code(cls, code: str) -> "CreditDebit":
        normalized = code.strip().upper()
        # RC/RD are reversals of a credit/debit.
        if normalized in ("C", "RC"):
            return cls.CREDIT
        if normalized in ("D", "RD"):
            return cls.DEBIT
        raise ValueError(f"Invalid MT940 credit/debit code: {code!r}")

    @classmethod
    def for_signed(cls, value: Decimal) -> "CreditDebit":
        return cls.CREDIT if value >= 0 else cls.DEBIT


def _coerce_direction(value: Any) -> Any:
    if isinstance(value, str) and value.strip().upper() in ("C", "D", "RC", "RD"):
        return CreditDebit.from_mt940_code(value)
    if isinstance(value, str):
        return value.strip().upper()
    return value


def quantize_amount(value: Decimal) -> Decimal:
    return value.quantize(AMOUNT_SCALE, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """MT940 amount: comma as decimal separator, no thousands separator."""
    return f"{quantize_amount(value):f}".replace(".", ",")


class Mt940Balance(BaseModel):
    model_config = ConfigDict(frozen=True)

    direction: CreditDebit
    date: dt.date
    currency: str = Field(pattern=r"^[A-Z]{3}$")
    amount: Decimal = Field(ge=0)

    @field_validator("direction", mode="before")
    @classmethod
    def _direction_code(cls, value: Any) -> Any:
        return _coerce_direction(value)

    @field_validator("amount")
    @classmethod
    def _quantize(cls, value: Decimal) -> Decimal:
        return quantize_amount(value)

    @property
    def signed_amount(self) -> Decimal:
        return self.amount * self.direction.sign

    @property
    def is_credit(self) -> bool:
        return self.direction is CreditDebit.CREDIT

    @property
    def is_debit(self) -> bool:
        return self.direction is CreditDebit.DEBIT

    @classmethod
    def from_signed(cls, value: Decimal, *, date: dt.date, currency: str) -> "Mt940Balance":
        return cls(
            direction=CreditDebit.for_signed(value),
            date=date,
            currency=currency,
            amount=abs(value),
        )

    def to_mt940(self) -> str:
        return f"{self.direction.to_mt940_code()}{self.date:%y%m%d}{self.currency}{format_amount(self.amount)}"

    def __str__(self) -> str:
        return self.to_mt940()


class Mt940Transaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    credit_debit: CreditDebit
    amount: Decimal = Field(ge=0)
    date: dt.date
    valuta_date: Optional[dt.date] = None
    # Transaction code + customer reference as written into :61:.
    reference: str = Field(default="NONREF", max_length=REFERENCE_MAX_LENGTH)
    purpose: str = ""

    @field_validator("credit_debit", mode="before")
    @classmethod
    def _direction_code(cls, value: Any) -> Any:
        return _coerce_direction(value)

    @field_validator("amount")
    @classmethod
    def _quantize(cls, value: Decimal) -> Decimal:
        return quantize_amount(value)

    @property
    def signed_amount(self) -> Decimal:
        return self.amount * self.credit_debit.sign

    def purpose_segments(self) -> List[str]:
        text = self.purpose or ""
        return [text[i : i + PURPOSE_SEGMENT_LENGTH] for i in range(0, len(text), PURPOSE_SEGMENT_LENGTH)]

    def to_mt940_lines(self) -> List[str]:
        valuta = f"{self.valuta_date:%m%d}" if self.valuta_date else ""
        lines = [
            f":61:{self.date:%y%m%d}{valuta}{self.credit_debit.to_mt940_code()}"
            f"{format_amount(self.amount)}{self.reference}"
        ]
        segments = self.purpose_segments()
        lines.append(":86:" + (segments[0] if segments else ""))
        for idx, segment in enumerate(segments[1:], start=20):
            lines.append(f"?{idx:02d}{segment}")
        return lines
