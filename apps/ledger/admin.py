# ==========================================
# apps/ledger/admin.py
# ==========================================

from django.contrib import admin
from .models import Category, LedgerTransaction


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin interface for ledger categories."""

    list_display = ['name', 'type', 'group', 'is_default', 'created_at']
    list_filter = ['type', 'is_default']
    search_fields = ['name', 'group__name']
    readonly_fields = ['created_at']
    ordering = ['group', '-is_default', 'type', 'name']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('group')


@admin.register(LedgerTransaction)
class LedgerTransactionAdmin(admin.ModelAdmin):
    """Admin interface for ledger transactions."""

    list_display = ['date', 'type', 'amount', 'category', 'group', 'created_by']
    list_filter = ['type', 'date']
    search_fields = ['description', 'group__name', 'created_by__email']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'date'
    ordering = ['-date', '-created_at']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('group', 'category', 'created_by')
