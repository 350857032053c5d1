"""DATEV document subtypes (format categories 16/20/21/46/48/65/66)."""

from .booking_batch import BOOKING_BATCH_FIELDS, booking_batch_header, booking_batch_widths
from .categories import FORMAT_NAMES, FORMAT_VERSIONS, DatevCategory, category_for_code, validate_category
from .document import DatevDocument, DatevDocumentBuilder
from .lines import FORMAT_TAGS, META_HEADER_FIELDS, MetaHeaderLine
from .meta_header import DatevMetaHeader

__all__ = [
    "BOOKING_BATCH_FIELDS",
    "FORMAT_NAMES",
    "FORMAT_TAGS",
    "FORMAT_VERSIONS",
    "META_HEADER_FIELDS",
    "DatevCategory",
    "DatevDocument",
    "DatevDocumentBuilder",
    "DatevMetaHeader",
    "MetaHeaderLine",
    "booking_batch_header",
    "booking_batch_widths",
    "category_for_code",
    "validate_category",
]
