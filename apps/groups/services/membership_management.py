"""
Membership management service.

Moves users between ledger groups. Every user belongs to exactly one
group after signup; each transition below runs in a single transaction
holding a row lock on the requesting user (and on every group whose
member count it acts on), so concurrent transitions for the same user
are serialized. Default categories for a newly created group are seeded
only after the transaction commits, and a seeding failure never affects
the outcome of the transition.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction, connection, DatabaseError, IntegrityError

from apps.accounts.models import User
from apps.groups.models import Group
from apps.ledger.services import seed_default_categories

from . import group_repository
from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    UserNotFoundError,
    InvalidInviteCodeError,
    InviteExpiredError,
    InvalidStateError,
    AlreadyMemberError,
    AlreadyProvisionedError,
    NotMemberError,
    OwnerCannotLeaveError,
    StorageError,
    ConstraintViolationError,
    TransitionTimeoutError,
)
from .invite_management import validate_invite

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for query_canceled (statement_timeout)
QUERY_CANCELED = '57014'


@dataclass
class MembershipResult:
    """Outcome of a join or leave: the user's group, or the business error."""

    group: Optional[Group] = None
    error: Optional[GroupsServiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Membership:
    group: Group
    role: str
    member_count: int


def personal_group_name(display_name: str) -> str:
    return f"{display_name}'s ledger"


def _as_uuid(value) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _is_statement_timeout(error: DatabaseError) -> bool:
    cause = error.__cause__
    code = getattr(cause, 'pgcode', None) or getattr(cause, 'sqlstate', None)
    return code == QUERY_CANCELED


@contextmanager
def membership_transition(user_id: UUID, *, timeout: Optional[float] = None):
    """
    Run a membership transition for one user.

    Opens a transaction, applies the deadline, locks the user row and
    yields the locked User. If the deadline passes before the block
    finishes the whole transaction is rolled back. Database failures are
    re-raised as StorageError.

    Args:
        user_id: UUID of the user whose membership changes
        timeout: Seconds before the transition is abandoned; defaults to
            settings.MEMBERSHIP_TRANSITION_TIMEOUT, 0 disables

    Raises:
        UserNotFoundError: If the user doesn't exist
        TransitionTimeoutError: If the deadline was exceeded
        ConstraintViolationError: If a write violated a constraint
        StorageError: On any other database failure
    """
    if timeout is None:
        timeout = getattr(settings, 'MEMBERSHIP_TRANSITION_TIMEOUT', 0)
    deadline = time.monotonic() + timeout if timeout else None

    try:
        with transaction.atomic():
            if timeout and connection.vendor == 'postgresql':
                with connection.cursor() as cursor:
                    cursor.execute(
                        "SELECT set_config('statement_timeout', %s, true)",
                        [str(int(timeout * 1000))],
                    )

            user = group_repository.lock_user(user_id=user_id)
            yield user

            if deadline is not None and time.monotonic() > deadline:
                raise TransitionTimeoutError(
                    f"Membership transition for user {user_id} exceeded {timeout}s"
                )
    except IntegrityError as e:
        raise ConstraintViolationError(f"Membership transition violated a constraint: {e}") from e
    except DatabaseError as e:
        if _is_statement_timeout(e):
            raise TransitionTimeoutError(
                f"Membership transition for user {user_id} exceeded {timeout}s"
            ) from e
        raise StorageError(f"Membership transition failed: {e}") from e


def _ensure_single_membership(user: User) -> None:
    if user.current_group_id is None:
        raise InvalidStateError(f"User {user.id} has no ledger group")


def _seed_categories_after_commit(*, group_id: UUID, creator_id: UUID) -> None:
    def seed():
        try:
            seed_default_categories(group_id=group_id, creator_id=creator_id)
        except Exception:
            logger.exception("Seeding default categories for group %s failed", group_id)

    transaction.on_commit(seed)


def provision_on_signup(
    *,
    user_id: UUID,
    display_name: Optional[str] = None,
    timeout: Optional[float] = None
) -> Group:
    """
    Create a new user's personal group and make them its owner.

    Args:
        user_id: UUID of the freshly created user
        display_name: Name used for the group; defaults to the user's
        timeout: Transition deadline in seconds

    Returns:
        The personal Group

    Raises:
        AlreadyProvisionedError: If the user already has a group
        StorageError: On database failure
    """
    with membership_transition(user_id, timeout=timeout) as user:
        if user.current_group_id is not None:
            raise AlreadyProvisionedError(f"User {user.id} already belongs to a group")

        group = group_repository.create_group_record(
            name=personal_group_name(display_name or user.get_display_name()),
            owner_id=user.id,
        )
        group_repository.set_user_group(user_id=user.id, group_id=group.id)
        _seed_categories_after_commit(group_id=group.id, creator_id=user.id)

    logger.info("Provisioned personal group %s for user %s", group.id, user_id)
    return group


def create_group(
    *,
    requester_id: UUID,
    name: str,
    timeout: Optional[float] = None
) -> Group:
    """
    Create a group owned by the requester and move them into it.

    The requester's previous group is left as it is, even when that
    leaves it without members.

    Args:
        requester_id: UUID of the user creating the group
        name: Group name
        timeout: Transition deadline in seconds

    Returns:
        Created Group instance

    Raises:
        ValueError: If name is blank
        InvalidStateError: If the requester was never provisioned
        StorageError: On database failure
    """
    if not name or not name.strip():
        raise ValueError("Group name is required")

    with membership_transition(requester_id, timeout=timeout) as user:
        _ensure_single_membership(user)

        group = group_repository.create_group_record(name=name.strip(), owner_id=user.id)
        group_repository.set_user_group(user_id=user.id, group_id=group.id)
        _seed_categories_after_commit(group_id=group.id, creator_id=user.id)

    logger.info(
        "User %s created group %s (previous group %s kept)",
        requester_id, group.id, user.current_group_id,
    )
    return group


def switch_to_group(
    *,
    requester_id: UUID,
    group_id: UUID,
    timeout: Optional[float] = None
) -> bool:
    """
    Move the requester into an existing group.

    If the requester owns their current group and is its only member,
    that group is deleted (with its invites and ledger data). Otherwise
    the old group is left as it is.

    Args:
        requester_id: UUID of the user joining
        group_id: UUID of the target group
        timeout: Transition deadline in seconds

    Returns:
        True on success, False if the user or target group doesn't exist
        or a constraint was violated

    Raises:
        AlreadyMemberError: If the requester is already in the target group
        InvalidStateError: If the requester was never provisioned
        StorageError: On any other database failure
    """
    try:
        target_id = _as_uuid(group_id)
    except ValueError:
        return False

    try:
        with membership_transition(requester_id, timeout=timeout) as user:
            _ensure_single_membership(user)

            memberships = group_repository.get_user_with_owned_groups(user_id=user.id)
            previous_id = memberships.group_id
            if previous_id == target_id:
                raise AlreadyMemberError("User is already a member of this group")

            locked = group_repository.lock_groups(group_ids=[previous_id, target_id])
            if target_id not in locked:
                raise GroupNotFoundError(f"Group with ID {target_id} not found")

            remove_previous = (
                memberships.owns(previous_id)
                and group_repository.count_members(group_id=previous_id) == 1
            )

            # Reassign before deleting: current_group is PROTECT
            group_repository.set_user_group(user_id=user.id, group_id=target_id)
            if remove_previous:
                group_repository.delete_group_record(group_id=previous_id)
    except (GroupNotFoundError, UserNotFoundError, ConstraintViolationError) as e:
        logger.warning("User %s could not join group %s: %s", requester_id, target_id, e)
        return False

    logger.info(
        "User %s joined group %s (previous group %s %s)",
        requester_id, target_id, previous_id,
        'deleted' if remove_previous else 'kept',
    )
    return True


def join_group(
    *,
    requester_id: UUID,
    invite_code: str,
    timeout: Optional[float] = None
) -> MembershipResult:
    """
    Join a group using an invite code.

    Returns:
        MembershipResult with the joined group, or with one of
        InvalidInviteCodeError, InviteExpiredError, AlreadyMemberError,
        InvalidStateError or GroupNotFoundError as ``error``

    Raises:
        StorageError: On database failure
    """
    validation = validate_invite(code=invite_code)
    if not validation.valid:
        if validation.expired:
            return MembershipResult(error=InviteExpiredError("Invite code has expired"))
        return MembershipResult(error=InvalidInviteCodeError("Invalid invite code"))

    try:
        joined = switch_to_group(
            requester_id=requester_id,
            group_id=validation.group_id,
            timeout=timeout,
        )
    except InvalidStateError as e:
        return MembershipResult(error=e)

    if not joined:
        return MembershipResult(error=GroupNotFoundError("Group not found or could not be joined"))

    try:
        group = group_repository.find_group(group_id=validation.group_id)
    except GroupNotFoundError as e:
        return MembershipResult(error=e)

    return MembershipResult(group=group)


def leave_group(
    *,
    requester_id: UUID,
    group_id: UUID,
    timeout: Optional[float] = None
) -> MembershipResult:
    """
    Leave a group and fall back to a fresh personal group.

    An owner can only leave a group they are alone in. Whoever leaves as
    the last member takes the group down with them; a member leaving a
    group that still has others leaves it intact.

    Returns:
        MembershipResult with the new personal group, or with
        NotMemberError / OwnerCannotLeaveError as ``error``

    Raises:
        StorageError: On database failure
    """
    try:
        with membership_transition(requester_id, timeout=timeout) as user:
            _ensure_single_membership(user)

            if str(user.current_group_id) != str(group_id):
                raise NotMemberError("User is not a member of this group")

            group = group_repository.lock_group(group_id=user.current_group_id)
            was_owner = group.is_owner(user)
            member_count = group_repository.count_members(group_id=group.id)

            if was_owner and member_count > 1:
                raise OwnerCannotLeaveError(
                    "Group owner cannot leave while other members exist."
                )

            personal_group = group_repository.create_group_record(
                name=personal_group_name(user.get_display_name()),
                owner_id=user.id,
            )
            group_repository.set_user_group(user_id=user.id, group_id=personal_group.id)

            # Last member out, owner or not
            remove_group = member_count == 1
            if remove_group:
                group_repository.delete_group_record(group_id=group.id)

            _seed_categories_after_commit(group_id=personal_group.id, creator_id=user.id)
    except (InvalidStateError, GroupNotFoundError, UserNotFoundError) as e:
        return MembershipResult(error=e)

    logger.info(
        "User %s left group %s (%s) for personal group %s",
        requester_id, group_id, 'deleted' if remove_group else 'kept', personal_group.id,
    )
    return MembershipResult(group=personal_group)


def get_membership(*, user_id: UUID) -> Membership:
    """
    Get the user's current group, role and member count.

    Raises:
        UserNotFoundError: If the user doesn't exist
        NotMemberError: If the user has no group yet
    """
    try:
        user = User.objects.select_related('current_group__owner').get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    group = user.current_group
    if group is None:
        raise NotMemberError("User does not belong to any group")

    return Membership(
        group=group,
        role=group.get_user_role(user),
        member_count=group_repository.count_members(group_id=group.id),
    )

