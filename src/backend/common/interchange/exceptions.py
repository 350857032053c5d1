"""
Exceptions raised by the interchange toolkit.

Every error carries a stable error code and a details dict so callers can
report the failing column/balance without parsing the message.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class InterchangeError(Exception):
    """
    Base exception for all interchange errors.

    Attributes:
        error_code: Unique error code (e.g., IX-100)
        message: Human-readable error message
        details: Additional error context
    """
    error_code: str = "IX-000"

    def __init__(
        self,
        message: str = "Interchange export failed",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


# Field encoding (IX-1XX)
class FieldTooLongError(InterchangeError):
    """Value exceeds its column width under the ERROR truncation strategy."""
    error_code = "IX-100"

    def __init__(self, column: Any, length: int, max_width: int, **kwargs):
        message = f"Value in column {column!r} is {length} characters long; maximum is {max_width}"
        super().__init__(
            message,
            details={"column": column, "length": length, "max_width": max_width},
            **kwargs,
        )
        self.column = column
        self.length = length
        self.max_width = max_width


# Document structure (IX-2XX)
class UnsupportedLineTypeError(InterchangeError):
    """Object handed to the assembler is not a recognized line variant."""
    error_code = "IX-200"

    def __init__(self, line: Any, expected: list[str], **kwargs):
        found = type(line).__name__
        message = f"Unsupported line type {found}. Expected: {', '.join(expected)}"
        super().__init__(message, details={"found": found, "expected": expected}, **kwargs)


class UnknownColumnError(InterchangeError):
    """A column name does not exist in the header."""
    error_code = "IX-201"

    def __init__(self, column: str, available: list[str], **kwargs):
        message = f"Column {column!r} does not exist in the header"
        super().__init__(message, details={"column": column, "available": available}, **kwargs)
        self.column = column


class MissingHeaderError(InterchangeError):
    """Operation needs a header line but none was set."""
    error_code = "IX-202"

    def __init__(self, message: str = "Document has no header line", **kwargs):
        super().__init__(message, **kwargs)


class DuplicateHeaderError(InterchangeError):
    """A second header was added to a builder that forbids overwriting it."""
    error_code = "IX-203"

    def __init__(self, message: str = "Header line is already set", **kwargs):
        super().__init__(message, **kwargs)


# DATEV validation (IX-3XX)
class WrongDocumentCategoryError(InterchangeError):
    """DATEV meta-header category code does not match the document subtype."""
    error_code = "IX-300"

    def __init__(self, expected: int, found: Optional[str], category_name: str = "", **kwargs):
        label = f" ({category_name})" if category_name else ""
        message = f"Wrong DATEV format category: expected {expected}{label}, found {found!r}"
        super().__init__(
            message,
            details={"expected": expected, "found": found, "category": category_name},
            **kwargs,
        )
        self.expected = expected
        self.found = found


class InvalidMetaHeaderError(InterchangeError):
    """DATEV meta-header or field header missing or malformed."""
    error_code = "IX-301"

    def __init__(self, message: str = "Invalid DATEV meta-header", **kwargs):
        super().__init__(message, **kwargs)


# Statement reconciliation (IX-4XX)
class MissingBalanceError(InterchangeError):
    """Neither opening nor closing balance was supplied."""
    error_code = "IX-400"

    def __init__(self, message: str = "At least one balance (opening or closing) is required", **kwargs):
        super().__init__(message, **kwargs)


class BalanceMismatchError(InterchangeError):
    """Opening balance plus transactions does not produce the given closing balance."""
    error_code = "IX-401"

    def __init__(self, expected: Any, actual: Any, **kwargs):
        message = f"Opening and closing balances do not reconcile: expected {expected}, got {actual}"
        super().__init__(
            message,
            details={"expected": str(expected), "actual": str(actual)},
            **kwargs,
        )
        self.expected = expected
        self.actual = actual
