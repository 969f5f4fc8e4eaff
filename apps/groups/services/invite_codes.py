"""
Invite code generation and structural validation.
"""

import secrets
import string

INVITE_CODE_LENGTH = 10
INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_invite_code() -> str:
    """Return a fresh 10-character uppercase alphanumeric code (CSPRNG)."""
    return ''.join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))


def normalize_invite_code(code: str) -> str:
    """Strip whitespace and upper-case user-typed codes."""
    return code.strip().upper()


def is_well_formed_invite_code(code) -> bool:
    """
    Structural check only: length and alphabet.

    A well-formed code is not necessarily an existing or valid invite.
    """
    if not isinstance(code, str) or len(code) != INVITE_CODE_LENGTH:
        return False
    return all(char in INVITE_CODE_ALPHABET for char in code)
