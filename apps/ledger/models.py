from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class TransactionType(models.TextChoices):
    EXPENSE = 'expense', 'Expense'
    INCOME = 'income', 'Income'
    TRANSFER = 'transfer', 'Transfer'


class Category(models.Model):
    """Ledger category scoped to a group."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='categories'
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_categories'
    )
    name = models.CharField(max_length=50)
    type = models.CharField(max_length=20, choices=TransactionType.choices)
    color = models.CharField(max_length=7, default='#6B7280')
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'categories'
        unique_together = [['group', 'name', 'type']]
        indexes = [
            models.Index(fields=['group', 'type'], name='categories_group_i_3a7c9b_idx'),
        ]
        ordering = ['-is_default', 'type', 'name']

    def __str__(self):
        return f"{self.name} ({self.type})"


class LedgerTransaction(models.Model):
    """Income, expense or transfer recorded in a group's ledger."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='transactions'
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='ledger_transactions'
    )
    type = models.CharField(max_length=20, choices=TransactionType.choices)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.CharField(max_length=200, blank=True)
    date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'transactions'
        indexes = [
            models.Index(fields=['group', 'date'], name='transaction_group_i_6b1e2f_idx'),
            models.Index(fields=['created_by', 'date'], name='transaction_created_9d4a7c_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.type} {self.amount} ({self.group.name})"
