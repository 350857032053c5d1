from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .config import (
    NO_OP_RULE,
    ColumnWidthConfig,
    ColumnWidthRule,
    CsvDialect,
    FrozenColumnWidths,
    PaddingRule,
)
from .encoder import apply_width, encode
from .exceptions import (
    DuplicateHeaderError,
    MissingHeaderError,
    UnknownColumnError,
    UnsupportedLineTypeError,
)
from .logging_setup import get_logger
from .models import DataLine, Field, HeaderLine, Line, TruncationStrategy, renumber

logger = get_logger(__name__)


def reorder_columns(
    header: Optional[HeaderLine],
    rows: Sequence[DataLine],
    new_order: Sequence[str],
) -> Tuple[HeaderLine, Tuple[DataLine, ...]]:
    """Return a new (header, rows) pair with columns in ``new_order``.

    Every name is resolved before anything is built, so an unknown name leaves
    the inputs untouched. Names may select a subset of the columns; rows that
    are shorter than the header yield empty values.
    """
    if header is None:
        raise MissingHeaderError("No header present; columns cannot be reordered")

    header_map: Dict[str, int] = {}
    for f in header.fields:
        header_map.setdefault(f.value, f.position)

    for name in new_order:
        if name not in header_map:
            logger.error("reorder_unknown_column", column=name)
            raise UnknownColumnError(name, header.names())

    positions = [header_map[name] for name in new_order]
    new_header = HeaderLine(renumber(header.fields[pos] for pos in positions))

    new_rows = []
    for row in rows:
        picked = (row.field_at(pos) or Field(pos, "") for pos in positions)
        new_rows.append(DataLine(renumber(picked), header=new_header))
    return new_header, tuple(new_rows)


def validate_column_widths(
    header: Optional[HeaderLine],
    config: Union[ColumnWidthConfig, FrozenColumnWidths, None],
) -> None:
    if config is None:
        return
    named = config.named_columns()
    if not named:
        return
    if header is None:
        raise MissingHeaderError(
            "Column width rules reference named columns but the document has no header",
            details={"columns": named},
        )
    available = header.names()
    for name in named:
        if name not in available:
            raise UnknownColumnError(name, available)


@dataclass(frozen=True)
class Document:
    header: Optional[HeaderLine] = None
    rows: Tuple[DataLine, ...] = ()
    delimiter: str = ","
    enclosure: str = '"'
    encoding: str = "utf-8"
    line_terminator: str = "\n"
    column_widths: Optional[FrozenColumnWidths] = None

    @property
    def has_header(self) -> bool:
        return self.header is not None

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def column_names(self) -> List[str]:
        return self.header.names() if self.header else []

    def column_index(self, name: str) -> int:
        return self.header.index_of(name) if self.header else -1

    def has_column(self, name: str) -> bool:
        return self.column_index(name) != -1

    def column_at(self, index: int) -> List[str]:
        if index < 0:
            raise IndexError(f"Column index {index} is invalid")
        values = []
        for row in self.rows:
            f = row.field_at(index)
            values.append(f.value if f is not None else "")
        return values

    def column(self, name: str) -> List[str]:
        index = self.column_index(name)
        if index == -1:
            raise UnknownColumnError(name, self.column_names())
        return self.column_at(index)

    def to_records(self) -> List[Dict[str, str]]:
        if not self.header:
            return []
        records = []
        for row in self.rows:
            record: Dict[str, str] = {}
            for idx, name in enumerate(self.header.names()):
                f = row.field_at(idx)
                # First occurrence wins for duplicated names.
                record.setdefault(name, f.value if f is not None else "")
            records.append(record)
        return records

    def is_consistent(self) -> bool:
        """All rows have as many fields as the header (or the first row)."""
        if not self.rows:
            return True
        expected = len(self.header) if self.header else len(self.rows[0])
        for idx, row in enumerate(self.rows):
            if len(row) != expected:
                logger.warning("row_field_count_mismatch", row=idx, expected=expected, found=len(row))
                return False
        return True

    def rule_for(self, position: int) -> ColumnWidthRule:
        if self.column_widths is None:
            return NO_OP_RULE
        name = None
        if self.header is not None and position < len(self.header):
            name = self.header.fields[position].value
        return self.column_widths.resolve(position, name)

    def column_label(self, position: int) -> Any:
        if self.header is not None and position < len(self.header):
            return self.header.fields[position].value
        return position

    def check_widths(self) -> None:
        """Raise FieldTooLongError for any value an ERROR rule would reject."""
        if self.column_widths is None:
            return
        for line in self.width_limited_lines():
            for f in line.fields:
                rule = self.rule_for(f.position)
                if rule.truncation == TruncationStrategy.ERROR:
                    apply_width(f.value, rule, column=self.column_label(f.position))

    def width_limited_lines(self) -> Iterator[Line]:
        if self.header is not None:
            yield self.header
        yield from self.rows

    def encode_line(self, line: Line, *, apply_widths: bool = True) -> str:
        cells = []
        for f in line.fields:
            rule = self.rule_for(f.position) if apply_widths else NO_OP_RULE
            column = self.column_label(f.position)
            cells.append(
                encode(
                    f.value,
                    rule,
                    self.delimiter,
                    self.enclosure,
                    force_quote=f.quoted,
                    column=column,
                )
            )
        return self.delimiter.join(cells)

    def lines(self) -> Iterator[str]:
        for line in self.width_limited_lines():
            yield self.encode_line(line)

    def to_string(self) -> str:
        return self.line_terminator.join(self.lines())

    def __str__(self) -> str:
        return self.to_string()


class DocumentBuilder:
    line_types: Tuple[type, ...] = (HeaderLine, DataLine)

    def __init__(
        self,
        dialect: Optional[CsvDialect] = None,
        *,
        column_widths: Optional[ColumnWidthConfig] = None,
        allow_header_overwrite: bool = True,
    ):
        self.dialect = dialect or CsvDialect.generic()
        self.column_widths = column_widths
        self.allow_header_overwrite = allow_header_overwrite
        self._header: Optional[HeaderLine] = None
        self._rows: List[DataLine] = []

    @classmethod
    def from_document(cls, document: Document, dialect: Optional[CsvDialect] = None) -> "DocumentBuilder":
        dialect = dialect or CsvDialect(
            delimiter=document.delimiter,
            enclosure=document.enclosure,
            encoding=document.encoding,
            line_terminator=document.line_terminator,
        )
        widths = document.column_widths.thaw() if document.column_widths else None
        builder = cls(dialect=dialect, column_widths=widths)
        builder._header = document.header
        builder._rows = list(document.rows)
        return builder

    @property
    def header(self) -> Optional[HeaderLine]:
        return self._header

    @property
    def rows(self) -> Tuple[DataLine, ...]:
        return tuple(self._rows)

    def set_header(self, header: HeaderLine) -> "DocumentBuilder":
        if not isinstance(header, HeaderLine):
            raise UnsupportedLineTypeError(header, ["HeaderLine"])
        if self._header is not None and not self.allow_header_overwrite:
            raise DuplicateHeaderError()
        self._header = header
        return self

    def add_row(self, row: DataLine) -> "DocumentBuilder":
        if not isinstance(row, DataLine):
            raise UnsupportedLineTypeError(row, ["DataLine"])
        self._rows.append(row)
        return self

    def add_rows(self, rows: Iterable[DataLine]) -> "DocumentBuilder":
        for row in rows:
            self.add_row(row)
        return self

    def add_line(self, line: Any) -> "DocumentBuilder":
        if isinstance(line, HeaderLine):
            return self.set_header(line)
        if isinstance(line, DataLine):
            return self.add_row(line)
        raise UnsupportedLineTypeError(line, [t.__name__ for t in self.line_types])

    def add_lines(self, lines: Iterable[Any]) -> "DocumentBuilder":
        for line in lines:
            self.add_line(line)
        return self

    def _widths(self) -> ColumnWidthConfig:
        if self.column_widths is None:
            self.column_widths = ColumnWidthConfig()
        return self.column_widths

    def set_column_width(
        self,
        column: Any,
        width: int,
        truncation: TruncationStrategy = TruncationStrategy.TRUNCATE,
        padding: Optional[PaddingRule] = None,
    ) -> "DocumentBuilder":
        self._widths().set_width(column, width, truncation=truncation, padding=padding)
        return self

    def set_default_column_width(
        self,
        width: Optional[int],
        truncation: TruncationStrategy = TruncationStrategy.TRUNCATE,
        padding: Optional[PaddingRule] = None,
    ) -> "DocumentBuilder":
        self._widths().set_default_width(width, truncation=truncation, padding=padding)
        return self

    def reorder_columns(self, new_order: Sequence[str]) -> "DocumentBuilder":
        header, rows = reorder_columns(self._header, self._rows, new_order)
        self._header = header
        self._rows = list(rows)
        return self

    def _frozen_widths(self) -> Optional[FrozenColumnWidths]:
        if self.column_widths is None or not self.column_widths.has_rules():
            return None
        return self.column_widths.freeze()

    def _bound_rows(self) -> Tuple[DataLine, ...]:
        return tuple(row.with_header(self._header) for row in self._rows)

    def build(self) -> Document:
        widths = self._frozen_widths()
        validate_column_widths(self._header, widths)
        document = Document(
            header=self._header,
            rows=self._bound_rows(),
            delimiter=self.dialect.delimiter,
            enclosure=self.dialect.enclosure,
            encoding=self.dialect.encoding,
            line_terminator=self.dialect.line_terminator,
            column_widths=widths,
        )
        document.check_widths()
        logger.debug("document_built", rows=document.row_count, columns=len(document.column_names()))
        return document
