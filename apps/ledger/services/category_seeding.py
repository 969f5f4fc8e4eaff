"""
Default category seeding.

Runs after a membership transition has committed a new group. Callers
treat it as best-effort.
"""

import logging
from typing import List
from uuid import UUID

from django.db import transaction, DatabaseError

from apps.ledger.models import Category, TransactionType

from .exceptions import CategorySeedingError

logger = logging.getLogger(__name__)


DEFAULT_CATEGORIES = [
    # Expenses
    ('Food', TransactionType.EXPENSE, '#10B981'),
    ('Transport', TransactionType.EXPENSE, '#3B82F6'),
    ('Housing', TransactionType.EXPENSE, '#8B5CF6'),
    ('Utilities', TransactionType.EXPENSE, '#F59E0B'),
    ('Healthcare', TransactionType.EXPENSE, '#EF4444'),
    ('Education', TransactionType.EXPENSE, '#6366F1'),
    ('Hobbies', TransactionType.EXPENSE, '#EC4899'),
    ('Shopping', TransactionType.EXPENSE, '#84CC16'),
    ('Other', TransactionType.EXPENSE, '#6B7280'),

    # Income
    ('Salary', TransactionType.INCOME, '#059669'),
    ('Allowance', TransactionType.INCOME, '#7C3AED'),
    ('Investments', TransactionType.INCOME, '#DC2626'),
    ('Other income', TransactionType.INCOME, '#4B5563'),

    # Transfers
    ('Account transfer', TransactionType.TRANSFER, '#374151'),
]


def seed_default_categories(*, group_id: UUID, creator_id: UUID) -> List[Category]:
    """
    Create the default categories for a group.

    Categories that already exist (same name and type) are skipped, so
    seeding the same group twice is harmless.

    Args:
        group_id: UUID of the group to seed
        creator_id: UUID of the user credited as creator

    Returns:
        List of newly created Category instances

    Raises:
        CategorySeedingError: If the categories cannot be written
    """
    try:
        with transaction.atomic():
            existing = set(
                Category.objects
                .filter(group_id=group_id, is_default=True)
                .values_list('name', 'type')
            )
            created = [
                Category.objects.create(
                    group_id=group_id,
                    created_by_id=creator_id,
                    name=name,
                    type=category_type,
                    color=color,
                    is_default=True,
                )
                for name, category_type, color in DEFAULT_CATEGORIES
                if (name, category_type.value) not in existing
            ]
    except DatabaseError as e:
        raise CategorySeedingError(f"Seeding categories for group {group_id} failed: {e}") from e

    logger.info("Seeded %d default categories for group %s", len(created), group_id)
    return created
