import pytest
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User
from apps.groups.models import Group, GroupInvite, GroupRole
from apps.groups.tests.utils import expire_invite


# =============================================================================
# Group Create / Retrieve Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupCreate:
    """Tests for POST /api/groups/"""

    def test_create_group(self, amy_client, amy):
        """Creating a group switches the requester into it."""
        url = reverse('groups:group-list')
        response = amy_client.post(url, {'name': 'Holiday fund'})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Holiday fund'
        assert response.data['user_role'] == GroupRole.OWNER
        assert response.data['member_count'] == 1
        assert response.data['owner']['display_name'] == 'Amy'

        amy.refresh_from_db()
        assert str(amy.current_group_id) == str(response.data['id'])

    def test_create_group_keeps_previous_group(self, amy_client, amy):
        previous_id = amy.current_group_id

        amy_client.post(reverse('groups:group-list'), {'name': 'Holiday fund'})

        assert Group.objects.filter(id=previous_id).exists()

    def test_create_group_blank_name(self, amy_client):
        response = amy_client.post(reverse('groups:group-list'), {'name': ''})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_group_unauthenticated(self, api_client):
        response = api_client.post(reverse('groups:group-list'), {'name': 'Nope'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestGroupRetrieve:
    """Tests for GET /api/groups/{id}/"""

    def test_retrieve_group_as_member(self, member_client, shared_group):
        url = reverse('groups:group-detail', kwargs={'pk': shared_group.id})
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == shared_group.name
        assert response.data['member_count'] == 2
        assert response.data['user_role'] == GroupRole.MEMBER

    def test_retrieve_group_as_non_member(self, amy_client, shared_group):
        """Non-members cannot view a group."""
        url = reverse('groups:group-detail', kwargs={'pk': shared_group.id})
        response = amy_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_retrieve_missing_group(self, amy_client):
        url = reverse('groups:group-detail', kwargs={'pk': '00000000-0000-0000-0000-000000000000'})
        response = amy_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCurrentGroup:
    """Tests for GET /api/groups/current/"""

    def test_current_group(self, owner_client, shared_group):
        response = owner_client.get(reverse('groups:group-current'))

        assert response.status_code == status.HTTP_200_OK
        assert str(response.data['group']['id']) == str(shared_group.id)
        assert response.data['role'] == GroupRole.OWNER
        assert response.data['member_count'] == 2

    def test_current_group_unprovisioned(self, api_client, db):
        """Users created outside signup have no group yet."""
        user = User.objects.create_user(email='raw@example.com', password='TestPass123!')
        api_client.force_authenticate(user=user)

        response = api_client.get(reverse('groups:group-current'))

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Join / Leave Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupJoin:
    """Tests for POST /api/groups/join/"""

    def test_join_group_with_valid_code(self, amy_client, amy, group_owner, invite_code):
        previous_id = amy.current_group_id
        response = amy_client.post(reverse('groups:group-join'), {'invite_code': invite_code})

        assert response.status_code == status.HTTP_200_OK
        assert str(response.data['id']) == str(group_owner.current_group_id)
        assert response.data['user_role'] == GroupRole.MEMBER
        assert response.data['member_count'] == 2
        assert not Group.objects.filter(id=previous_id).exists()

    def test_join_group_with_invalid_code(self, amy_client, amy):
        response = amy_client.post(reverse('groups:group-join'), {'invite_code': 'ZZZZZZZZZZ'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_join_group_with_expired_code(self, amy_client, invite_code):
        expire_invite(invite_code)

        response = amy_client.post(reverse('groups:group-join'), {'invite_code': invite_code})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'expired' in response.data['error']
        assert not GroupInvite.objects.filter(code=invite_code).exists()

    def test_join_group_already_member(self, owner_client, invite_code):
        response = owner_client.post(reverse('groups:group-join'), {'invite_code': invite_code})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_join_group_missing_code(self, amy_client):
        response = amy_client.post(reverse('groups:group-join'), {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'invite_code' in response.data


@pytest.mark.django_db
class TestGroupLeave:
    """Tests for POST /api/groups/{id}/leave/"""

    def test_leave_group_as_member(self, member_client, member_user, shared_group):
        url = reverse('groups:group-leave', kwargs={'pk': shared_group.id})
        response = member_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == "Carol's ledger"
        assert response.data['user_role'] == GroupRole.OWNER
        member_user.refresh_from_db()
        assert str(member_user.current_group_id) == str(response.data['id'])
        assert Group.objects.filter(id=shared_group.id).exists()

    def test_leave_group_as_owner_forbidden(self, owner_client, group_owner, shared_group):
        """Owner can't leave while other members exist."""
        url = reverse('groups:group-leave', kwargs={'pk': shared_group.id})
        response = owner_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        group_owner.refresh_from_db()
        assert group_owner.current_group_id == shared_group.id

    def test_leave_group_not_member(self, amy_client, shared_group):
        url = reverse('groups:group-leave', kwargs={'pk': shared_group.id})
        response = amy_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Invite Tests
# =============================================================================

@pytest.mark.django_db
class TestIssueInvite:
    """Tests for POST /api/groups/{id}/invite/"""

    def test_issue_invite_as_owner(self, owner_client, group_owner):
        url = reverse('groups:group-invite', kwargs={'pk': group_owner.current_group_id})
        response = owner_client.post(url)

        assert response.status_code == status.HTTP_201_CREATED
        code = response.data['invite_code']
        assert len(code) == 10
        assert response.data['invite_url'] == f'https://ledger.example.com/groups/join?code={code}'
        assert 'expires_at' in response.data

    def test_issue_invite_supersedes_previous(self, owner_client, group_owner, invite_code):
        url = reverse('groups:group-invite', kwargs={'pk': group_owner.current_group_id})
        owner_client.post(url)

        assert not GroupInvite.objects.filter(code=invite_code).exists()

    def test_issue_invite_as_member_forbidden(self, member_client, shared_group):
        url = reverse('groups:group-invite', kwargs={'pk': shared_group.id})
        response = member_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_issue_invite_missing_group(self, owner_client):
        url = reverse('groups:group-invite', kwargs={'pk': '00000000-0000-0000-0000-000000000000'})
        response = owner_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.parametrize('pk', ['-' * 36, 'not-a-uuid-at-all-but-exactly-36-chr'])
    def test_issue_invite_malformed_group_id(self, owner_client, pk):
        """Group ids that aren't UUIDs never reach the service."""
        response = owner_client.post(f'/api/groups/{pk}/invite/')

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCheckInvite:
    """Tests for GET /api/groups/invites/{code}/"""

    def test_check_valid_invite(self, amy_client, group_owner, invite_code):
        url = reverse('groups:check-invite', kwargs={'code': invite_code})
        response = amy_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['valid'] is True
        assert response.data['expired'] is False
        assert str(response.data['group_id']) == str(group_owner.current_group_id)

    def test_check_unknown_invite(self, amy_client):
        url = reverse('groups:check-invite', kwargs={'code': 'ZZZZZZZZZZ'})
        response = amy_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['valid'] is False
        assert response.data['group_id'] is None

    def test_check_expired_invite(self, amy_client, invite_code):
        expire_invite(invite_code)
        url = reverse('groups:check-invite', kwargs={'code': invite_code})

        first = amy_client.get(url)
        second = amy_client.get(url)

        assert first.data['valid'] is False
        assert first.data['expired'] is True
        assert second.data['valid'] is False

    def test_check_invite_unauthenticated(self, api_client, invite_code):
        url = reverse('groups:check-invite', kwargs={'code': invite_code})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
