"""Services for ledger business logic."""

from .exceptions import (
    LedgerServiceError,
    CategorySeedingError,
)
from .category_seeding import DEFAULT_CATEGORIES, seed_default_categories

__all__ = [
    # Exceptions
    'LedgerServiceError',
    'CategorySeedingError',
    # Services
    'DEFAULT_CATEGORIES',
    'seed_default_categories',
]
