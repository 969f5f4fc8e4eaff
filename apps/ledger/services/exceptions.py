"""Domain-specific exceptions for ledger services."""


class LedgerServiceError(Exception):
    """Base exception for ledger services."""
    pass


class CategorySeedingError(LedgerServiceError):
    """Raised when default categories cannot be created for a group."""
    pass
