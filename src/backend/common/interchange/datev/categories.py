from __future__ import annotations

from enum import IntEnum
from typing import Dict, Optional

from ..exceptions import InvalidMetaHeaderError, WrongDocumentCategoryError
from ..logging_setup import get_logger
from .lines import FORMAT_TAGS, MetaHeaderLine

logger = get_logger(__name__)


class DatevCategory(IntEnum):
    """DATEV format category (Formatkategorie, meta-header index 2)."""

    DEBTORS_CREDITORS = 16
    ACCOUNT_LABELS = 20
    BOOKING_BATCH = 21
    PAYMENT_TERMS = 46
    VARIOUS_ADDRESSES = 48
    RECURRING_BOOKINGS = 65
    NATURAL_BATCH = 66

    @property
    def format_name(self) -> str:
        return FORMAT_NAMES[self]

    @property
    def format_version(self) -> int:
        return FORMAT_VERSIONS[self]


FORMAT_NAMES: Dict[DatevCategory, str] = {
    DatevCategory.DEBTORS_CREDITORS: "Debitoren/Kreditoren",
    DatevCategory.ACCOUNT_LABELS: "Kontenbeschriftungen",
    DatevCategory.BOOKING_BATCH: "Buchungsstapel",
    DatevCategory.PAYMENT_TERMS: "Zahlungsbedingungen",
    DatevCategory.VARIOUS_ADDRESSES: "Diverse Adressen",
    DatevCategory.RECURRING_BOOKINGS: "Wiederkehrende Buchungen",
    DatevCategory.NATURAL_BATCH: "Natural-Stapel",
}

# Formatversion written by default for header version 700.
FORMAT_VERSIONS: Dict[DatevCategory, int] = {
    DatevCategory.DEBTORS_CREDITORS: 5,
    DatevCategory.ACCOUNT_LABELS: 2,
    DatevCategory.BOOKING_BATCH: 13,
    DatevCategory.PAYMENT_TERMS: 2,
    DatevCategory.VARIOUS_ADDRESSES: 2,
    DatevCategory.RECURRING_BOOKINGS: 4,
    DatevCategory.NATURAL_BATCH: 2,
}


def category_for_code(code: object) -> Optional[DatevCategory]:
    try:
        return DatevCategory(int(str(code).strip()))
    except ValueError:
        return None


def validate_category(meta_header: Optional[MetaHeaderLine], category: DatevCategory) -> None:
    """Check the meta-header format tag and that its category code matches ``category``."""
    if meta_header is None:
        raise InvalidMetaHeaderError("DATEV meta-header is missing")

    tag = meta_header.format_tag
    if tag not in FORMAT_TAGS:
        raise InvalidMetaHeaderError(
            f"Invalid DATEV meta-header: expected one of {', '.join(FORMAT_TAGS)}, found {tag!r}",
            details={"found": tag},
        )

    found = meta_header.category_code
    if category_for_code(found) != category:
        logger.error(
            "wrong_document_category",
            expected=category.value,
            found=found,
            category=category.format_name,
        )
        raise WrongDocumentCategoryError(category.value, found, category.format_name)
