# ==========================================
# apps/groups/models.py
# ==========================================

from django.db import models
from django.utils import timezone
import uuid


class GroupRole(models.TextChoices):
    OWNER = 'owner', 'Owner'
    MEMBER = 'member', 'Member'


class Group(models.Model):
    """
    Shared ledger context.

    Membership is not stored as a row: a user is a member of the group
    their ``current_group`` points at.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    owner = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='owned_groups')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'groups'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='groups_owner_i_5c1f0e_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def has_member(self, user):
        return user.current_group_id == self.id

    def get_user_role(self, user):
        if not self.has_member(user):
            return None
        if self.owner_id == user.id:
            return GroupRole.OWNER
        return GroupRole.MEMBER

    def is_owner(self, user):
        return self.owner_id == user.id


class GroupInvite(models.Model):
    """Time-limited invitation code resolving to a group."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='invites')
    code = models.CharField(max_length=10, unique=True, db_index=True, editable=False)
    created_by = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='issued_invites')
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'group_invites'
        indexes = [
            models.Index(fields=['group', 'expires_at'], name='group_invit_group_i_8e2d4a_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.code} -> {self.group.name}"

    def is_expired(self, now=None):
        now = now or timezone.now()
        return now > self.expires_at
