"""
Invite management service.

Issues and validates time-limited group invite codes. A group has at most
one non-expired invite: issuing a new code deletes the previous ones.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from urllib.parse import urlencode
from uuid import UUID

from django.conf import settings
from django.db import transaction, DatabaseError, IntegrityError
from django.utils import timezone

from . import group_repository
from .exceptions import (
    ConstraintViolationError,
    InsufficientPermissionsError,
    StorageError,
)
from .invite_codes import (
    generate_invite_code,
    is_well_formed_invite_code,
    normalize_invite_code,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedInvite:
    code: str
    url: str
    expires_at: datetime


@dataclass(frozen=True)
class InviteValidation:
    group_id: Optional[UUID]
    valid: bool
    expired: bool = False


def get_invite_ttl() -> timedelta:
    return timedelta(hours=getattr(settings, 'INVITE_TTL_HOURS', 24))


def build_invite_url(code: str) -> str:
    """Return ``<base-url>/groups/join?code=<code>``."""
    base_url = getattr(settings, 'INVITE_BASE_URL', 'http://localhost:3000').rstrip('/')
    return f"{base_url}/groups/join?{urlencode({'code': code})}"


def issue_invite(
    *,
    group_id: UUID,
    requester_id: UUID,
    max_retries: int = 5
) -> IssuedInvite:
    """
    Issue a fresh invite code for a group (owner only).

    Every attempt is its own transaction: lock the group, delete all
    non-expired invites, store the new one. A unique-code collision rolls
    the attempt back and retries with a new code.

    Args:
        group_id: UUID of the group
        requester_id: UUID of the user issuing the invite
        max_retries: Maximum attempts to generate a unique code

    Returns:
        IssuedInvite with code, join URL and expiry

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If requester is not the owner
        ConstraintViolationError: If no unique code was found after retries
        StorageError: On any other database failure
    """
    for attempt in range(max_retries):
        code = generate_invite_code()

        try:
            with transaction.atomic():
                group = group_repository.lock_group(group_id=group_id)

                if str(group.owner_id) != str(requester_id):
                    raise InsufficientPermissionsError("Only the group owner can issue invites")

                now = timezone.now()
                superseded = group_repository.delete_non_expired_invites(group_id=group.id, now=now)
                invite = group_repository.create_invite(
                    group_id=group.id,
                    created_by_id=requester_id,
                    code=code,
                    expires_at=now + get_invite_ttl(),
                )
        except IntegrityError as e:
            # Code collision (very rare)
            if attempt == max_retries - 1:
                raise ConstraintViolationError(
                    f"Failed to generate unique invite code after {max_retries} attempts"
                ) from e
            continue
        except DatabaseError as e:
            raise StorageError(f"Issuing invite for group {group_id} failed: {e}") from e

        logger.info(
            "Issued invite for group %s by user %s (superseded %d)",
            group.id, requester_id, superseded,
        )
        return IssuedInvite(
            code=invite.code,
            url=build_invite_url(invite.code),
            expires_at=invite.expires_at,
        )

    # Should never reach here
    raise StorageError("Unexpected error in invite issuing")


def validate_invite(*, code: str) -> InviteValidation:
    """
    Resolve an invite code to its group.

    An expired invite is deleted on access. Two concurrent validations of
    the same expired code may both try to delete it; the loser finds
    nothing to delete and still reports the code as invalid.

    Args:
        code: Invite code as typed by the user

    Returns:
        InviteValidation; ``valid`` is True only for a stored, unexpired code

    Raises:
        StorageError: On database failure
    """
    if not isinstance(code, str):
        return InviteValidation(group_id=None, valid=False)

    code = normalize_invite_code(code)
    if not is_well_formed_invite_code(code):
        return InviteValidation(group_id=None, valid=False)

    try:
        invite = group_repository.find_invite_by_code(code=code)
        if invite is None:
            return InviteValidation(group_id=None, valid=False)

        if invite.is_expired(timezone.now()):
            group_repository.delete_invite(invite_id=invite.id)
            logger.info("Deleted expired invite for group %s", invite.group_id)
            return InviteValidation(group_id=invite.group_id, valid=False, expired=True)
    except DatabaseError as e:
        raise StorageError(f"Validating invite failed: {e}") from e

    return InviteValidation(group_id=invite.group_id, valid=True)


def purge_expired_invites() -> int:
    """Delete every expired invite. Returns the number removed."""
    try:
        purged = group_repository.delete_expired_invites(now=timezone.now())
    except DatabaseError as e:
        raise StorageError(f"Purging expired invites failed: {e}") from e

    logger.info("Purged %d expired invites", purged)
    return purged
