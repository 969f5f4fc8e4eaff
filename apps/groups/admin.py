# ==========================================
# apps/groups/admin.py
# ==========================================

from django.contrib import admin
from apps.groups.models import Group, GroupInvite


class GroupInviteInline(admin.TabularInline):
    """Inline admin for group invites."""
    model = GroupInvite
    extra = 0
    fields = ['code', 'created_by', 'expires_at', 'created_at']
    readonly_fields = ['code', 'created_by', 'expires_at', 'created_at']

    def has_add_permission(self, request, obj=None):
        """Invites are issued by the invite service only."""
        return False


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Admin interface for Groups."""

    list_display = [
        'name',
        'owner',
        'member_count',
        'created_at'
    ]
    list_filter = ['created_at']
    search_fields = ['name', 'owner__email']
    readonly_fields = ['owner', 'created_at']
    inlines = [GroupInviteInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def member_count(self, obj):
        """Show number of members."""
        return obj.members.count()
    member_count.short_description = 'Members'

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('owner')


@admin.register(GroupInvite)
class GroupInviteAdmin(admin.ModelAdmin):
    """Admin interface for Group Invites."""

    list_display = ['code', 'group', 'created_by', 'expires_at', 'is_expired']
    list_filter = ['expires_at']
    search_fields = ['code', 'group__name', 'created_by__email']
    readonly_fields = ['code', 'group', 'created_by', 'expires_at', 'created_at']
    ordering = ['-created_at']

    def is_expired(self, obj):
        return obj.is_expired()
    is_expired.boolean = True
    is_expired.short_description = 'Expired'

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('group', 'created_by')
