from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, DeletionReason, DeletionStatus


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'created_at', 'last_login']


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class UserRegistrationSerializer(serializers.Serializer):
    """Validate registration input."""

    email = serializers.EmailField(max_length=255)
    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'}
    )

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


# =============================================================================
# Account deletion
# =============================================================================

class DeletionRequestInputSerializer(serializers.Serializer):
    """Validate a deletion request from the account settings."""

    reason = serializers.ChoiceField(
        choices=DeletionReason.choices,
        default=DeletionReason.OTHER
    )
    reason_text = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class DeletionRequestDetailSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    status = serializers.ChoiceField(choices=DeletionStatus.choices)
    reason = serializers.CharField()
    reason_text = serializers.CharField(allow_blank=True)
    requested_at = serializers.DateTimeField()
    scheduled_deletion_at = serializers.DateTimeField()
    days_remaining = serializers.IntegerField()
    can_recover = serializers.BooleanField()


class DeletionStatusSerializer(serializers.Serializer):
    """Deletion state shown on the settings and recovery pages."""

    has_deletion_request = serializers.BooleanField()
    is_scheduled_for_deletion = serializers.BooleanField()
    deletion_request = DeletionRequestDetailSerializer(allow_null=True)
