"""
Domain-specific exceptions for groups app.

Business rule violations are caught in views (or returned inside a
MembershipResult) and converted to appropriate HTTP responses.
StorageError is the only family that is expected to propagate.
"""


class GroupsServiceError(Exception):
    """Base exception for all groups service errors."""
    pass


class GroupNotFoundError(GroupsServiceError):
    """Raised when a group does not exist or is inaccessible."""
    pass


class UserNotFoundError(GroupsServiceError):
    """Raised when the requesting user does not exist."""
    pass


class InvalidInviteCodeError(GroupsServiceError):
    """Raised when an invite code is malformed, unknown or superseded."""
    pass


class InviteExpiredError(InvalidInviteCodeError):
    """Raised when an invite code is past its time-to-live."""
    pass


class InsufficientPermissionsError(GroupsServiceError):
    """Raised when a user lacks required permissions for an action."""
    pass


class InvalidStateError(GroupsServiceError):
    """Raised when a transition does not match the user's current membership."""
    pass


class NotMemberError(InvalidStateError):
    """Raised when a user tries to perform an action requiring membership."""
    pass


class AlreadyMemberError(InvalidStateError):
    """Raised when a user tries to join the group they're already in."""
    pass


class OwnerCannotLeaveError(InvalidStateError):
    """Raised when a group owner tries to leave a group with other members."""
    pass


class AlreadyProvisionedError(InvalidStateError):
    """Raised when signup provisioning runs for a user who already has a group."""
    pass


class StorageError(GroupsServiceError):
    """Raised when the database fails underneath a membership operation."""
    pass


class ConstraintViolationError(StorageError):
    """Raised when a write violates a database constraint."""
    pass


class TransitionTimeoutError(StorageError):
    """Raised when a transition exceeds its deadline and is rolled back."""
    pass
