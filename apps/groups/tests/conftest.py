import pytest
from rest_framework.test import APIClient
from apps.accounts.services import register_user
from apps.groups.services import issue_invite, join_group
from apps.groups.tests.utils import client_for


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def group_owner(db):
    """Bob: registered user who owns the shared group."""
    return register_user(
        email='bob@example.com',
        password='TestPass123!',
        display_name='Bob',
    )


@pytest.fixture
def amy(db):
    """Amy: registered user alone in her personal group."""
    return register_user(
        email='amy@example.com',
        password='TestPass123!',
        display_name='Amy',
    )


@pytest.fixture
def member_user(db):
    """Carol: registered user, joins the shared group via ``shared_group``."""
    return register_user(
        email='carol@example.com',
        password='TestPass123!',
        display_name='Carol',
    )


@pytest.fixture
def shared_group(group_owner, member_user):
    """Bob's group with Carol as a second member."""
    issued = issue_invite(group_id=group_owner.current_group_id, requester_id=group_owner.id)
    result = join_group(requester_id=member_user.id, invite_code=issued.code)
    assert result.ok, result.error

    group_owner.refresh_from_db()
    member_user.refresh_from_db()
    return group_owner.current_group


@pytest.fixture
def invite_code(group_owner):
    """A fresh invite code for Bob's group."""
    issued = issue_invite(group_id=group_owner.current_group_id, requester_id=group_owner.id)
    return issued.code


@pytest.fixture
def owner_client(group_owner):
    """Return API client authenticated as Bob."""
    return client_for(group_owner)


@pytest.fixture
def amy_client(amy):
    """Return API client authenticated as Amy."""
    return client_for(amy)


@pytest.fixture
def member_client(member_user):
    """Return API client authenticated as Carol."""
    return client_for(member_user)
