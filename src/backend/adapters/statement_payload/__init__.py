"""Statement payload adapters for pre-parsed JSON (no I/O)."""

from .statement import StatementPayloadError, statement_from_payload

__all__ = [
    "StatementPayloadError",
    "statement_from_payload",
]
