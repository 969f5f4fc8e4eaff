from rest_framework import serializers
from .models import Group
from apps.accounts.serializers import UserPublicSerializer


class GroupSerializer(serializers.ModelSerializer):
    """Main serializer for groups."""

    owner = UserPublicSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()
    user_role = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'owner',
            'member_count',
            'user_role',
            'created_at',
        ]
        read_only_fields = fields

    def get_member_count(self, obj):
        """Get number of members in the group."""
        return obj.members.count()

    def get_user_role(self, obj):
        """Get current user's role in the group."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None


class GroupCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating groups."""

    class Meta:
        model = Group
        fields = ['name']


class JoinGroupSerializer(serializers.Serializer):
    """Serializer for joining a group with an invite code."""

    invite_code = serializers.CharField(max_length=32, trim_whitespace=True)


class MembershipSerializer(serializers.Serializer):
    """Current user's group, role and member count."""

    group = GroupSerializer(read_only=True)
    role = serializers.CharField(read_only=True)
    member_count = serializers.IntegerField(read_only=True)


class IssuedInviteSerializer(serializers.Serializer):
    """Freshly issued invite code."""

    invite_code = serializers.CharField(source='code', read_only=True)
    invite_url = serializers.CharField(source='url', read_only=True)
    expires_at = serializers.DateTimeField(read_only=True)


class InviteValidationSerializer(serializers.Serializer):
    """Result of resolving an invite code."""

    group_id = serializers.UUIDField(read_only=True, allow_null=True)
    valid = serializers.BooleanField(read_only=True)
    expired = serializers.BooleanField(read_only=True)
