"""
Group repository.

Data-access functions for Group and GroupInvite records and derived
membership queries. Each function is a single statement (or a short
read-then-write) and is composed into larger transactions by the
membership and invite services. Row locks only take effect inside an
enclosing ``transaction.atomic()`` block.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from apps.accounts.models import User
from apps.groups.models import Group, GroupInvite

from .exceptions import GroupNotFoundError, UserNotFoundError


@dataclass(frozen=True)
class UserGroups:
    """A user's current group and the groups they own."""

    group_id: Optional[UUID]
    owned_group_ids: List[UUID] = field(default_factory=list)

    def owns(self, group_id) -> bool:
        return group_id in self.owned_group_ids


# =============================================================================
# Groups
# =============================================================================

def create_group_record(*, name: str, owner_id: UUID) -> Group:
    return Group.objects.create(name=name, owner_id=owner_id)


def delete_group_record(*, group_id: UUID) -> None:
    """
    Delete a group.

    FK cascades remove its invites, categories and ledger transactions
    in the caller's transaction. Members must already have been moved
    elsewhere; ``User.current_group`` is PROTECT.
    """
    deleted, _ = Group.objects.filter(id=group_id).delete()
    if not deleted:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def find_group(*, group_id: UUID) -> Group:
    try:
        return Group.objects.select_related('owner').get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def lock_group(*, group_id: UUID) -> Group:
    try:
        return Group.objects.select_for_update().get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def lock_groups(*, group_ids: List[UUID]) -> Dict[UUID, Group]:
    """Lock several groups in primary key order. Missing ids are omitted."""
    groups = (
        Group.objects
        .select_for_update()
        .filter(id__in=[group_id for group_id in group_ids if group_id is not None])
        .order_by('id')
    )
    return {group.id: group for group in groups}


def count_members(*, group_id: UUID) -> int:
    return User.objects.filter(current_group_id=group_id).count()


# =============================================================================
# Users
# =============================================================================

def lock_user(*, user_id: UUID) -> User:
    """Take the per-user row lock that serializes membership transitions."""
    try:
        return User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")


def set_user_group(*, user_id: UUID, group_id: UUID) -> None:
    updated = User.objects.filter(id=user_id).update(current_group_id=group_id)
    if not updated:
        raise UserNotFoundError(f"User with ID {user_id} not found")


def get_user_with_owned_groups(*, user_id: UUID) -> UserGroups:
    try:
        group_id = User.objects.values_list('current_group_id', flat=True).get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    owned_group_ids = list(
        Group.objects
        .filter(owner_id=user_id)
        .values_list('id', flat=True)
    )
    return UserGroups(group_id=group_id, owned_group_ids=owned_group_ids)


# =============================================================================
# Invites
# =============================================================================

def create_invite(
    *,
    group_id: UUID,
    created_by_id: UUID,
    code: str,
    expires_at: datetime
) -> GroupInvite:
    return GroupInvite.objects.create(
        group_id=group_id,
        created_by_id=created_by_id,
        code=code,
        expires_at=expires_at,
    )


def delete_non_expired_invites(*, group_id: UUID, now: datetime) -> int:
    deleted, _ = GroupInvite.objects.filter(group_id=group_id, expires_at__gte=now).delete()
    return deleted


def find_invite_by_code(*, code: str) -> Optional[GroupInvite]:
    return GroupInvite.objects.filter(code=code).first()


def delete_invite(*, invite_id: UUID) -> bool:
    """Delete an invite; returns False if it was already gone."""
    deleted, _ = GroupInvite.objects.filter(id=invite_id).delete()
    return bool(deleted)


def delete_expired_invites(*, now: datetime) -> int:
    deleted, _ = GroupInvite.objects.filter(expires_at__lt=now).delete()
    return deleted
