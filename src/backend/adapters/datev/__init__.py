"""DATEV export adapters (statement -> booking batch)."""

from .bank_bookings import booking_batch_from_statement, booking_row

__all__ = [
    "booking_batch_from_statement",
    "booking_row",
]
