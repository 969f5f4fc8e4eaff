"""Helpers shared by the groups tests."""

from datetime import timedelta
from django.db.models import Count
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupInvite


def client_for(user):
    """Return an API client authenticated as ``user``."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


def expire_invite(code):
    """Move an invite's expiry into the past."""
    GroupInvite.objects.filter(code=code).update(
        expires_at=timezone.now() - timedelta(seconds=1)
    )


def assert_membership_invariants(allow_empty=()):
    """
    Every user points at an existing group and no group is left empty.

    ``allow_empty`` lists group ids that are known to be empty, such as the
    previous group kept by create_group.
    """
    for user in User.objects.all():
        assert user.current_group_id is not None, f"{user} has no group"
        assert Group.objects.filter(id=user.current_group_id).exists()

    empty = set(
        Group.objects
        .annotate(member_count=Count('members'))
        .filter(member_count=0)
        .values_list('id', flat=True)
    )
    assert empty <= set(allow_empty), f"groups left without members: {empty - set(allow_empty)}"
