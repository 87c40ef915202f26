from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import Organization, OrganizationMembership
from .services import ASSIGNABLE_ROLES


class OrganizationSerializer(serializers.ModelSerializer):
    """Main serializer for organizations."""

    owner = UserMinimalSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()
    user_role = serializers.SerializerMethodField()

    class Meta:
        model = Organization
        fields = [
            'id',
            'name',
            'description',
            'currency',
            'advance_payment_review_required',
            'invite_code',
            'owner',
            'member_count',
            'user_role',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'invite_code', 'owner', 'created_at', 'updated_at']

    def get_member_count(self, obj):
        return obj.memberships.count()

    def get_user_role(self, obj):
        """Current user's role in the organization."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None


class OrganizationCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    currency = serializers.CharField(min_length=3, max_length=3, required=False)
    advance_payment_review_required = serializers.BooleanField(required=False, default=False)

    def validate_currency(self, value):
        return value.upper()


class OrganizationUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    currency = serializers.CharField(min_length=3, max_length=3, required=False)
    advance_payment_review_required = serializers.BooleanField(required=False)

    def validate_currency(self, value):
        return value.upper()


class OrganizationListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    owner = UserMinimalSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Organization
        fields = ['id', 'name', 'description', 'currency', 'owner', 'member_count', 'created_at']
        read_only_fields = fields

    def get_member_count(self, obj):
        return obj.memberships.count()


class OrganizationMemberSerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = OrganizationMembership
        fields = ['id', 'user', 'role', 'joined_at']
        read_only_fields = fields


class JoinOrganizationSerializer(serializers.Serializer):
    invite_code = serializers.CharField(max_length=16)


class UpdateMemberRoleSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    role = serializers.ChoiceField(choices=[(role.value, role.label) for role in ASSIGNABLE_ROLES])


class MemberReferenceSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()


class InviteCodeSerializer(serializers.Serializer):
    invite_code = serializers.CharField()
