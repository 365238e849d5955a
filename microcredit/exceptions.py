"""Custom exception hierarchy for the microcredit ledger."""


class LedgerError(Exception):
    """Base exception for all microcredit errors."""


class EntityNotFoundError(LedgerError):
    """Raised when a loan or client id does not resolve."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a loan references a client that does not exist."""


class InvalidEntityStateError(LedgerError):
    """Raised when an entity is in an invalid state for the operation."""


class MalformedImportError(LedgerError):
    """Raised when a database snapshot cannot be imported."""


class ConfigurationError(LedgerError):
    """Raised when configuration is invalid or missing."""


class StorageError(LedgerError):
    """Raised when the key-value store cannot be read or written."""
