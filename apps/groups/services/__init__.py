"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All membership transitions run in one transaction under a per-user row lock.
"""

from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    UserNotFoundError,
    InvalidInviteCodeError,
    InviteExpiredError,
    InsufficientPermissionsError,
    InvalidStateError,
    NotMemberError,
    AlreadyMemberError,
    OwnerCannotLeaveError,
    AlreadyProvisionedError,
    StorageError,
    ConstraintViolationError,
    TransitionTimeoutError,
)

from .invite_codes import (
    generate_invite_code,
    is_well_formed_invite_code,
    normalize_invite_code,
)

from .invite_management import (
    IssuedInvite,
    InviteValidation,
    build_invite_url,
    issue_invite,
    validate_invite,
    purge_expired_invites,
)

from .membership_management import (
    MembershipResult,
    Membership,
    personal_group_name,
    provision_on_signup,
    create_group,
    switch_to_group,
    join_group,
    leave_group,
    get_membership,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupNotFoundError',
    'UserNotFoundError',
    'InvalidInviteCodeError',
    'InviteExpiredError',
    'InsufficientPermissionsError',
    'InvalidStateError',
    'NotMemberError',
    'AlreadyMemberError',
    'OwnerCannotLeaveError',
    'AlreadyProvisionedError',
    'StorageError',
    'ConstraintViolationError',
    'TransitionTimeoutError',

    # Invite codes
    'generate_invite_code',
    'is_well_formed_invite_code',
    'normalize_invite_code',

    # Invite management
    'IssuedInvite',
    'InviteValidation',
    'build_invite_url',
    'issue_invite',
    'validate_invite',
    'purge_expired_invites',

    # Membership management
    'MembershipResult',
    'Membership',
    'personal_group_name',
    'provision_on_signup',
    'create_group',
    'switch_to_group',
    'join_group',
    'leave_group',
    'get_membership',
]
