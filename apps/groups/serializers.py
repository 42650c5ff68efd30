from rest_framework import serializers
from .models import Group, GroupMembership
from apps.accounts.models import User


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class GroupMemberSerializer(serializers.ModelSerializer):
    """Roster entry: the member's identity as captured when they joined."""

    user_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = GroupMembership
        fields = ['user_id', 'display_name', 'email', 'joined_at']
        read_only_fields = fields


class GroupSerializer(serializers.ModelSerializer):
    """Main serializer for groups."""

    created_by = UserMinimalSerializer(read_only=True)
    member_ids = serializers.ListField(child=serializers.UUIDField(), read_only=True)
    members = GroupMemberSerializer(source='memberships', many=True, read_only=True)
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'invite_code',
            'created_by',
            'member_ids',
            'members',
            'member_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_member_count(self, obj):
        return len(obj.memberships.all())


class GroupListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    created_by = UserMinimalSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'invite_code',
            'created_by',
            'member_count',
            'created_at',
        ]
        read_only_fields = fields

    def get_member_count(self, obj):
        return len(obj.memberships.all())


class GroupCreateSerializer(serializers.Serializer):
    """Input for creating a group. Blank names are rejected by the service."""

    name = serializers.CharField(max_length=200, allow_blank=True, trim_whitespace=False)
    description = serializers.CharField(required=False, allow_blank=True, default='')


class JoinGroupSerializer(serializers.Serializer):
    """Serializer for joining a group with invite code."""

    invite_code = serializers.CharField(max_length=16, required=True)


class InviteCodeSerializer(serializers.Serializer):
    invite_code = serializers.CharField()
    message = serializers.CharField()
