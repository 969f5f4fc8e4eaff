from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .models import Group
from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    JoinGroupSerializer,
    MembershipSerializer,
    IssuedInviteSerializer,
    InviteValidationSerializer,
)
from .permissions import IsGroupMember

from apps.groups.services import (
    create_group,
    join_group,
    leave_group,
    get_membership,
    issue_invite,
    validate_invite,
    # Exceptions
    GroupNotFoundError,
    InsufficientPermissionsError,
    InvalidStateError,
)


class GroupViewSet(viewsets.GenericViewSet):
    """
    ViewSet for ledger group membership.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    create: Create a new group and switch into it
    retrieve: Get a specific group (members only)
    current: Get the current user's group and role
    join: Join a group with an invite code
    leave: Leave a group for a fresh personal group
    invite: Issue an invite code (owner only)
    """

    queryset = Group.objects.select_related('owner')
    serializer_class = GroupSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}'

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'create':
            return GroupCreateSerializer
        if self.action == 'join':
            return JoinGroupSerializer
        return GroupSerializer

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action == 'retrieve':
            return [IsAuthenticated(), IsGroupMember()]
        return [IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        """Create a new group."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            group = create_group(
                requester_id=request.user.id,
                name=serializer.validated_data['name'],
            )
        except (ValueError, InvalidStateError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        request.user.refresh_from_db(fields=['current_group'])
        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        """Get group details."""
        group = self.get_object()
        return Response(GroupSerializer(group, context={'request': request}).data)

    @extend_schema(responses={200: MembershipSerializer})
    @action(detail=False, methods=['get'])
    def current(self, request):
        """Get the current user's group membership."""
        try:
            membership = get_membership(user_id=request.user.id)
        except InvalidStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        serializer = MembershipSerializer(membership, context={'request': request})
        return Response(serializer.data)

    @extend_schema(request=JoinGroupSerializer, responses={200: GroupSerializer})
    @action(detail=False, methods=['post'])
    def join(self, request):
        """Join a group using invite code."""
        serializer = JoinGroupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = join_group(
            requester_id=request.user.id,
            invite_code=serializer.validated_data['invite_code'],
        )
        if not result.ok:
            return Response({'error': str(result.error)}, status=status.HTTP_400_BAD_REQUEST)

        request.user.refresh_from_db(fields=['current_group'])
        output_serializer = GroupSerializer(result.group, context={'request': request})
        return Response(output_serializer.data)

    @extend_schema(request=None, responses={200: GroupSerializer})
    @action(detail=True, methods=['post'])
    def leave(self, request, pk=None):
        """Leave a group."""
        result = leave_group(requester_id=request.user.id, group_id=pk)
        if not result.ok:
            return Response({'error': str(result.error)}, status=status.HTTP_400_BAD_REQUEST)

        request.user.refresh_from_db(fields=['current_group'])
        output_serializer = GroupSerializer(result.group, context={'request': request})
        return Response(output_serializer.data)

    @extend_schema(request=None, responses={201: IssuedInviteSerializer})
    @action(detail=True, methods=['post'])
    def invite(self, request, pk=None):
        """Issue a new invite code (owner only)."""
        try:
            issued = issue_invite(group_id=pk, requester_id=request.user.id)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(IssuedInviteSerializer(issued).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: InviteValidationSerializer},
    description="Check whether an invite code resolves to a group.",
    tags=['groups'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def check_invite(request, code):
    """Validate an invite code."""
    validation = validate_invite(code=code)
    return Response(InviteValidationSerializer(validation).data)
