"""Microcredit loan and capital ledger."""

from microcredit.book import MicrocreditBook
from microcredit.config import LedgerSettings
from microcredit.exceptions import (
    EntityNotFoundError,
    InvalidEntityStateError,
    LedgerError,
    MalformedImportError,
)

__version__ = "0.1.0"

__all__ = [
    "EntityNotFoundError",
    "InvalidEntityStateError",
    "LedgerError",
    "LedgerSettings",
    "MalformedImportError",
    "MicrocreditBook",
]
