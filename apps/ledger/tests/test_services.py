"""Tests for default category seeding and group-scoped ledger data."""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import patch
from django.db import DatabaseError

from apps.accounts.services import register_user
from apps.groups.services import group_repository
from apps.ledger.models import Category, LedgerTransaction, TransactionType
from apps.ledger.services import (
    DEFAULT_CATEGORIES,
    CategorySeedingError,
    seed_default_categories,
)


@pytest.fixture
def user(db):
    return register_user(
        email='ledger@example.com',
        password='TestPass123!',
        display_name='Ledger',
    )


@pytest.mark.django_db
class TestSeedDefaultCategories:
    """Tests for seed_default_categories()."""

    def test_seeds_all_defaults(self, user):
        created = seed_default_categories(group_id=user.current_group_id, creator_id=user.id)

        assert len(created) == len(DEFAULT_CATEGORIES)
        categories = Category.objects.filter(group_id=user.current_group_id)
        assert categories.filter(type=TransactionType.EXPENSE).count() == 9
        assert categories.filter(type=TransactionType.INCOME).count() == 4
        assert categories.filter(type=TransactionType.TRANSFER).count() == 1
        assert all(category.is_default for category in categories)
        assert all(category.created_by_id == user.id for category in categories)

    def test_seeding_twice_is_harmless(self, user):
        seed_default_categories(group_id=user.current_group_id, creator_id=user.id)
        created = seed_default_categories(group_id=user.current_group_id, creator_id=user.id)

        assert created == []
        assert Category.objects.filter(group_id=user.current_group_id).count() == len(DEFAULT_CATEGORIES)

    def test_fills_in_missing_defaults(self, user):
        seed_default_categories(group_id=user.current_group_id, creator_id=user.id)
        Category.objects.filter(group_id=user.current_group_id, name='Food').delete()

        created = seed_default_categories(group_id=user.current_group_id, creator_id=user.id)

        assert [category.name for category in created] == ['Food']

    def test_same_name_different_type_allowed(self, user):
        """Category names are unique per group and type."""
        Category.objects.create(
            group_id=user.current_group_id,
            name='Food',
            type=TransactionType.INCOME,
        )

        created = seed_default_categories(group_id=user.current_group_id, creator_id=user.id)

        assert len(created) == len(DEFAULT_CATEGORIES)

    def test_database_failure_raises_seeding_error(self, user):
        with patch.object(Category.objects, 'create', side_effect=DatabaseError('disk full')):
            with pytest.raises(CategorySeedingError):
                seed_default_categories(group_id=user.current_group_id, creator_id=user.id)

        assert not Category.objects.filter(group_id=user.current_group_id).exists()


@pytest.mark.django_db
class TestGroupScopedLedgerData:
    """Ledger rows live and die with their group."""

    def test_deleting_group_removes_ledger_data(self, user):
        other = register_user(email='other@example.com', password='TestPass123!')
        group_id = other.current_group_id
        seed_default_categories(group_id=group_id, creator_id=other.id)
        food = Category.objects.get(group_id=group_id, name='Food')
        LedgerTransaction.objects.create(
            group_id=group_id,
            category=food,
            created_by=other,
            type=TransactionType.EXPENSE,
            amount=Decimal('42.00'),
            date=date.today(),
        )
        seed_default_categories(group_id=user.current_group_id, creator_id=user.id)

        # Move the member out first; current_group is protected
        group_repository.set_user_group(user_id=other.id, group_id=user.current_group_id)
        group_repository.delete_group_record(group_id=group_id)

        assert not Category.objects.filter(group_id=group_id).exists()
        assert not LedgerTransaction.objects.filter(group_id=group_id).exists()
        assert Category.objects.filter(group_id=user.current_group_id).count() == len(DEFAULT_CATEGORIES)

    def test_deleting_category_keeps_transactions(self, user):
        seed_default_categories(group_id=user.current_group_id, creator_id=user.id)
        food = Category.objects.get(group_id=user.current_group_id, name='Food')
        entry = LedgerTransaction.objects.create(
            group_id=user.current_group_id,
            category=food,
            created_by=user,
            type=TransactionType.EXPENSE,
            amount=Decimal('3.50'),
            date=date.today(),
        )

        food.delete()

        entry.refresh_from_db()
        assert entry.category is None
