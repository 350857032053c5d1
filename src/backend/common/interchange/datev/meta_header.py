from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .categories import DatevCategory
from .lines import MetaHeaderLine


def _ymd(value: Optional[date]) -> str:
    return value.strftime("%Y%m%d") if value else ""


class DatevMetaHeader(BaseModel):
    """Typed values of the DATEV meta-header (header version 700).

    ``to_line()`` renders the 31 positional fields; strings are enclosed,
    numbers and dates are not.
    """

    model_config = ConfigDict(frozen=True)

    format_tag: Literal["EXTF", "DTVF"] = "EXTF"
    version: Literal[700] = 700
    category: DatevCategory = DatevCategory.BOOKING_BATCH
    # Defaults to the category's name/version when unset.
    format_name: Optional[str] = None
    format_version: Optional[int] = None

    created_at: Optional[datetime] = None
    origin: str = Field(default="", pattern=r"^\w{0,2}$")
    exported_by: str = Field(default="", pattern=r"^\w{0,25}$")
    imported_by: str = Field(default="", pattern=r"^\w{0,25}$")

    consultant_number: int = Field(ge=1001, le=9999999)
    client_number: int = Field(ge=1, le=99999)
    fiscal_year_start: Optional[date] = None
    account_length: int = Field(default=4, ge=4, le=8)
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    label: str = Field(default="", pattern=r"^[\w.\-/ ]{0,30}$")
    dictation_code: str = Field(default="", pattern=r"^([A-Z]{2}){0,2}$")
    booking_type: Optional[Literal[1, 2]] = 1
    accounting_purpose: Optional[Literal[0, 30, 40, 50, 64]] = None
    locked: bool = False
    currency: str = Field(default="EUR", pattern=r"^[A-Z]{3}$")

    chart_of_accounts: str = Field(default="", pattern=r"^(\d{2}){0,2}$")
    industry_solution_id: Optional[int] = Field(default=None, ge=0, le=9999)
    application_info: str = Field(default="", max_length=16)

    def _cells(self) -> List[Tuple[str, bool]]:
        created = ""
        if self.created_at is not None:
            created = self.created_at.strftime("%Y%m%d%H%M%S") + f"{self.created_at.microsecond // 1000:03d}"
        return [
            (self.format_tag, True),
            (str(self.version), False),
            (str(self.category.value), False),
            (self.format_name or self.category.format_name, True),
            (str(self.format_version or self.category.format_version), False),
            (created, False),
            ("", False),
            (self.origin, True),
            (self.exported_by, True),
            (self.imported_by, True),
            (str(self.consultant_number), False),
            (str(self.client_number), False),
            (_ymd(self.fiscal_year_start), False),
            (str(self.account_length), False),
            (_ymd(self.date_from), False),
            (_ymd(self.date_to), False),
            (self.label, True),
            (self.dictation_code, True),
            (str(self.booking_type) if self.booking_type is not None else "", False),
            (str(self.accounting_purpose) if self.accounting_purpose is not None else "", False),
            ("1" if self.locked else "0", False),
            (self.currency, True),
            ("", False),
            ("", True),
            ("", False),
            ("", False),
            (self.chart_of_accounts, True),
            (str(self.industry_solution_id) if self.industry_solution_id is not None else "", False),
            ("", False),
            ("", True),
            (self.application_info, True),
        ]

    def to_line(self) -> MetaHeaderLine:
        cells = self._cells()
        return MetaHeaderLine.from_values(
            [value for value, _ in cells],
            quoted=[quoted for _, quoted in cells],
        )
