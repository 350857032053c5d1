from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Sequence, Union

from ..config import ColumnWidthConfig, CsvDialect
from ..document import Document, DocumentBuilder, reorder_columns, validate_column_widths
from ..exceptions import InvalidMetaHeaderError, UnsupportedLineTypeError
from ..logging_setup import get_logger
from ..models import DataLine, HeaderLine, Line
from .booking_batch import booking_batch_header
from .categories import DatevCategory, validate_category
from .lines import MetaHeaderLine
from .meta_header import DatevMetaHeader

logger = get_logger(__name__)


@dataclass(frozen=True)
class DatevDocument(Document):
    meta_header: Optional[MetaHeaderLine] = None
    category: DatevCategory = DatevCategory.BOOKING_BATCH

    @property
    def format_type(self) -> str:
        return self.category.format_name

    def validate(self) -> None:
        if self.header is None:
            raise InvalidMetaHeaderError("DATEV field header is missing")
        validate_category(self.meta_header, self.category)

    def width_limited_lines(self) -> Iterator[Line]:
        # Field names are fixed by the format and often longer than the column.
        yield from self.rows

    def lines(self) -> Iterator[str]:
        if self.meta_header is not None:
            yield self.encode_line(self.meta_header, apply_widths=False)
        if self.header is not None:
            yield self.encode_line(self.header, apply_widths=False)
        yield from super().lines()

    def to_dict(self) -> Dict[str, Any]:
        records = self.to_records()
        return {
            "meta": {
                "format": "DATEV",
                "format_type": self.format_type,
                "category": self.category.value,
                "meta_header": self.meta_header.to_dict() if self.meta_header else None,
                "columns": len(self.header) if self.header else 0,
                "rows": len(records),
            },
            "data": records,
        }


class DatevDocumentBuilder(DocumentBuilder):
    """Assembles one DATEV document subtype, selected by ``category``.

    The booking batch field header is filled in automatically when none was
    set, both on ``build()`` and on ``reorder_columns()``. Every other category
    needs an explicit header.
    """

    line_types = (MetaHeaderLine, HeaderLine, DataLine)

    def __init__(
        self,
        category: DatevCategory = DatevCategory.BOOKING_BATCH,
        dialect: Optional[CsvDialect] = None,
        *,
        column_widths: Optional[ColumnWidthConfig] = None,
        allow_header_overwrite: bool = True,
    ):
        super().__init__(
            dialect or CsvDialect.datev(),
            column_widths=column_widths,
            allow_header_overwrite=allow_header_overwrite,
        )
        self.category = DatevCategory(category)
        self._meta_header: Optional[MetaHeaderLine] = None

    @classmethod
    def from_document(cls, document: Document, dialect: Optional[CsvDialect] = None) -> "DatevDocumentBuilder":
        builder = super().from_document(document, dialect)
        if isinstance(document, DatevDocument):
            builder.category = document.category
            builder._meta_header = document.meta_header
        return builder

    @property
    def meta_header(self) -> Optional[MetaHeaderLine]:
        return self._meta_header

    def set_meta_header(self, meta_header: Union[MetaHeaderLine, DatevMetaHeader]) -> "DatevDocumentBuilder":
        if isinstance(meta_header, DatevMetaHeader):
            meta_header = meta_header.to_line()
        if not isinstance(meta_header, MetaHeaderLine):
            raise UnsupportedLineTypeError(meta_header, ["MetaHeaderLine", "DatevMetaHeader"])
        self._meta_header = meta_header
        return self

    def add_line(self, line: Any) -> "DatevDocumentBuilder":
        if isinstance(line, MetaHeaderLine):
            return self.set_meta_header(line)
        super().add_line(line)
        return self

    def _default_header(self) -> Optional[HeaderLine]:
        if self._header is None and self.category == DatevCategory.BOOKING_BATCH:
            return booking_batch_header()
        return self._header

    def reorder_columns(self, new_order: Sequence[str]) -> "DatevDocumentBuilder":
        header, rows = reorder_columns(self._default_header(), self._rows, new_order)
        self._header = header
        self._rows = list(rows)
        return self

    def build(self) -> DatevDocument:
        header = self._default_header()
        widths = self._frozen_widths()
        validate_column_widths(header, widths)
        document = DatevDocument(
            header=header,
            rows=tuple(row.with_header(header) for row in self._rows),
            delimiter=self.dialect.delimiter,
            enclosure=self.dialect.enclosure,
            encoding=self.dialect.encoding,
            line_terminator=self.dialect.line_terminator,
            column_widths=widths,
            meta_header=self._meta_header,
            category=self.category,
        )
        document.validate()
        document.check_widths()
        logger.info(
            "datev_document_built",
            category=self.category.value,
            format_type=document.format_type,
            rows=document.row_count,
        )
        return document
