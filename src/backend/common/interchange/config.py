from __future__ import annotations

from datetime import date
from typing import Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, model_validator

from .models import PadDirection, TruncationStrategy

Column = Union[int, str]


class PaddingRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    char: str = Field(default=" ", min_length=1, max_length=1)
    direction: PadDirection = PadDirection.RIGHT


class ColumnWidthRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    # None means no width limit; padding and truncation then never apply.
    max_width: Optional[PositiveInt] = None
    truncation: TruncationStrategy = TruncationStrategy.TRUNCATE
    padding: Optional[PaddingRule] = None

    @property
    def pads(self) -> bool:
        return self.max_width is not None and self.padding is not None and self.padding.enabled


NO_OP_RULE = ColumnWidthRule(truncation=TruncationStrategy.NONE)


class ColumnWidthConfig(BaseModel):
    """Per-column width rules for a CSV/DATEV document.

    Rules keyed by name are only resolved to a position once the header is
    known. The config stays mutable; built documents hold a ``freeze()`` snapshot.
    """

    by_name: Dict[str, ColumnWidthRule] = Field(default_factory=dict)
    by_position: Dict[int, ColumnWidthRule] = Field(default_factory=dict)
    default: Optional[ColumnWidthRule] = None

    def set_rule(self, column: Column, rule: ColumnWidthRule) -> "ColumnWidthConfig":
        if isinstance(column, bool):
            raise TypeError("Column must be a name or a position, not bool")
        if isinstance(column, int):
            if column < 0:
                raise ValueError(f"Column position must be >= 0, got {column}")
            self.by_position[column] = rule
        else:
            self.by_name[column] = rule
        return self

    def set_width(
        self,
        column: Column,
        width: int,
        truncation: TruncationStrategy = TruncationStrategy.TRUNCATE,
        padding: Optional[PaddingRule] = None,
    ) -> "ColumnWidthConfig":
        rule = ColumnWidthRule(max_width=width, truncation=truncation, padding=padding)
        return self.set_rule(column, rule)

    def set_widths(self, widths: Mapping[Column, int]) -> "ColumnWidthConfig":
        for column, width in widths.items():
            self.set_width(column, width)
        return self

    def set_default_rule(self, rule: Optional[ColumnWidthRule]) -> "ColumnWidthConfig":
        self.default = rule
        return self

    def set_default_width(
        self,
        width: Optional[int],
        truncation: TruncationStrategy = TruncationStrategy.TRUNCATE,
        padding: Optional[PaddingRule] = None,
    ) -> "ColumnWidthConfig":
        if width is None:
            return self.set_default_rule(None)
        return self.set_default_rule(
            ColumnWidthRule(max_width=width, truncation=truncation, padding=padding)
        )

    def named_columns(self) -> List[str]:
        return list(self.by_name.keys())

    def has_rules(self) -> bool:
        return bool(self.by_name or self.by_position or self.default is not None)

    def resolve(self, position: int, name: Optional[str] = None) -> ColumnWidthRule:
        if name is not None and name in self.by_name:
            return self.by_name[name]
        if position in self.by_position:
            return self.by_position[position]
        if self.default is not None:
            return self.default
        return NO_OP_RULE

    def freeze(self) -> "FrozenColumnWidths":
        return FrozenColumnWidths(
            by_name=tuple(self.by_name.items()),
            by_position=tuple(sorted(self.by_position.items())),
            default=self.default,
        )


class FrozenColumnWidths(BaseModel):
    """Read-only snapshot of a ColumnWidthConfig, held by built documents."""

    model_config = ConfigDict(frozen=True)

    by_name: Tuple[Tuple[str, ColumnWidthRule], ...] = ()
    by_position: Tuple[Tuple[int, ColumnWidthRule], ...] = ()
    default: Optional[ColumnWidthRule] = None

    def named_columns(self) -> List[str]:
        return [name for name, _ in self.by_name]

    def has_rules(self) -> bool:
        return bool(self.by_name or self.by_position or self.default is not None)

    def resolve(self, position: int, name: Optional[str] = None) -> ColumnWidthRule:
        if name is not None:
            for column, rule in self.by_name:
                if column == name:
                    return rule
        for column, rule in self.by_position:
            if column == position:
                return rule
        if self.default is not None:
            return self.default
        return NO_OP_RULE

    def thaw(self) -> ColumnWidthConfig:
        return ColumnWidthConfig(
            by_name=dict(self.by_name),
            by_position=dict(self.by_position),
            default=self.default,
        )


class CsvDialect(BaseModel):
    model_config = ConfigDict(frozen=True)

    delimiter: str = Field(default=",", min_length=1, max_length=1)
    enclosure: str = Field(default='"', min_length=1, max_length=1)
    # Label only; transcoding happens where the text is written.
    encoding: str = "utf-8"
    line_terminator: str = "\n"

    @model_validator(mode="after")
    def _distinct_delimiter_and_enclosure(self) -> "CsvDialect":
        if self.delimiter == self.enclosure:
            raise ValueError("delimiter and enclosure must differ")
        return self

    @classmethod
    def generic(cls) -> "CsvDialect":
        return cls()

    @classmethod
    def datev(cls) -> "CsvDialect":
        return cls(delimiter=";", enclosure='"', encoding="windows-1252", line_terminator="\r\n")


class DatevExportSettings(BaseModel):
    # Berater-/Mandantennummer as assigned by DATEV.
    consultant_number: int = Field(default=1001, ge=1001, le=9999999)
    client_number: int = Field(default=1, ge=1, le=99999)
    fiscal_year_start: Optional[date] = None
    account_length: int = Field(default=4, ge=4, le=8)
    label: str = Field(default="", max_length=30)
    currency: str = Field(default="EUR", pattern=r"^[A-Z]{3}$")

    # Ledger account of the bank and the contra (transit) account bookings post against.
    bank_account: str = Field(default="1200", pattern=r"^\d{1,9}$")
    contra_account: str = Field(default="1360", pattern=r"^\d{1,9}$")


class ExportProfile(BaseModel):
    """Client-specific export settings, typically loaded from JSON."""

    dialect: CsvDialect = Field(default_factory=CsvDialect.datev)
    column_widths: ColumnWidthConfig = Field(default_factory=ColumnWidthConfig)
    datev: DatevExportSettings = Field(default_factory=DatevExportSettings)
