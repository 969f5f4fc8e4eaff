"""User registration service."""

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.groups.services import provision_on_signup

from .exceptions import UserRegistrationError

User = get_user_model()


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = ""
) -> User:
    """
    Register a new user and provision their personal ledger group.

    The user row and the personal group commit together; default
    categories are seeded after commit.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name

    Returns:
        Created User instance with ``current_group`` set

    Raises:
        UserRegistrationError: If the user cannot be created
        StorageError: If the personal group cannot be provisioned
    """
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("A user with this email already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name
        )
    except (IntegrityError, ValueError) as e:
        raise UserRegistrationError(f"Registration failed: {str(e)}")

    provision_on_signup(user_id=user.id, display_name=user.get_display_name())

    user.refresh_from_db()
    return user
