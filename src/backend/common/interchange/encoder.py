"""Field encoder: width limiting, padding and CSV escaping for one cell."""

from __future__ import annotations

import unicodedata
from typing import Any, Optional

from .config import ColumnWidthRule
from .exceptions import FieldTooLongError
from .logging_setup import get_logger
from .models import PadDirection, TruncationStrategy

logger = get_logger(__name__)

ELLIPSIS = "..."


def _cut(value: str, width: int) -> str:
    # Keep combining marks with their base character.
    cut = width
    while cut > 0 and unicodedata.combining(value[cut]):
        cut -= 1
    return value[:cut]


def _pad(value: str, width: int, char: str, direction: PadDirection) -> str:
    missing = width - len(value)
    if direction == PadDirection.LEFT:
        return char * missing + value
    if direction == PadDirection.BOTH:
        left = missing // 2
        return char * left + value + char * (missing - left)
    return value + char * missing


def apply_width(value: str, rule: ColumnWidthRule, *, column: Optional[Any] = None) -> str:
    """Truncate or pad ``value`` according to ``rule``; no escaping."""
    max_width = rule.max_width
    if max_width is None:
        return value

    length = len(value)
    if length > max_width:
        if rule.truncation == TruncationStrategy.NONE:
            return value
        if rule.truncation == TruncationStrategy.ERROR:
            logger.error("field_too_long", column=column, length=length, max_width=max_width)
            raise FieldTooLongError(column, length, max_width)
        if rule.truncation == TruncationStrategy.ELLIPSIS and max_width > len(ELLIPSIS):
            return _cut(value, max_width - len(ELLIPSIS)) + ELLIPSIS
        return _cut(value, max_width)

    if rule.pads and length < max_width:
        return _pad(value, max_width, rule.padding.char, rule.padding.direction)
    return value


def escape(value: str, delimiter: str, enclosure: str, *, force_quote: bool = False) -> str:
    needs_enclosure = (
        force_quote
        or delimiter in value
        or enclosure in value
        or "\n" in value
        or "\r" in value
    )
    if not needs_enclosure:
        return value
    doubled = value.replace(enclosure, enclosure * 2)
    return f"{enclosure}{doubled}{enclosure}"


def encode(
    value: str,
    rule: ColumnWidthRule,
    delimiter: str,
    enclosure: str,
    *,
    force_quote: bool = False,
    column: Optional[Any] = None,
) -> str:
    return escape(apply_width(value, rule, column=column), delimiter, enclosure, force_quote=force_quote)
