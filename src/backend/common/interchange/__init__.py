"""Fixed-format interchange toolkit (DATEV CSV and MT940).

This package contains only format logic:
- Field encoding under column width rules, line/document assembly, DATEV
  category validation and MT940 balance reconciliation.
- No file or network I/O lives here; callers write ``to_string()`` output.
"""

from .config import (
    NO_OP_RULE,
    ColumnWidthConfig,
    ColumnWidthRule,
    CsvDialect,
    DatevExportSettings,
    ExportProfile,
    FrozenColumnWidths,
    PaddingRule,
)
from .document import Document, DocumentBuilder, reorder_columns, validate_column_widths
from .encoder import apply_width, encode, escape
from .exceptions import (
    BalanceMismatchError,
    DuplicateHeaderError,
    FieldTooLongError,
    InterchangeError,
    InvalidMetaHeaderError,
    MissingBalanceError,
    MissingHeaderError,
    UnknownColumnError,
    UnsupportedLineTypeError,
    WrongDocumentCategoryError,
)
from .models import DataLine, Field, HeaderLine, Line, PadDirection, TruncationStrategy

__all__ = [
    "NO_OP_RULE",
    "BalanceMismatchError",
    "ColumnWidthConfig",
    "ColumnWidthRule",
    "CsvDialect",
    "DataLine",
    "DatevExportSettings",
    "Document",
    "DocumentBuilder",
    "DuplicateHeaderError",
    "ExportProfile",
    "Field",
    "FieldTooLongError",
    "FrozenColumnWidths",
    "HeaderLine",
    "InterchangeError",
    "InvalidMetaHeaderError",
    "Line",
    "MissingBalanceError",
    "MissingHeaderError",
    "PadDirection",
    "PaddingRule",
    "TruncationStrategy",
    "UnknownColumnError",
    "UnsupportedLineTypeError",
    "WrongDocumentCategoryError",
    "apply_width",
    "encode",
    "escape",
    "reorder_columns",
    "validate_column_widths",
]
