from rest_framework import serializers

from apps.accounts.models import User
from apps.accounts.serializers import UserMinimalSerializer
from .models import AvailabilityRecord, AvailabilityStatus


class AvailabilityRecordSerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)
    duration_days = serializers.IntegerField(read_only=True)

    class Meta:
        model = AvailabilityRecord
        fields = [
            'id',
            'user',
            'start_date',
            'end_date',
            'duration_days',
            'reason',
            'status',
            'created_by',
            'created_at',
        ]
        read_only_fields = fields


class AvailabilityCreateSerializer(serializers.Serializer):
    """Input for recording an absence; ``user`` defaults to the caller."""

    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class AvailabilityFilterSerializer(serializers.Serializer):
    organization = serializers.UUIDField(required=False)
    user = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=AvailabilityStatus.choices, required=False)
    date = serializers.DateField(required=False, help_text="Only absences covering this date")


class StatusQuerySerializer(serializers.Serializer):
    organization = serializers.UUIDField()
    date = serializers.DateField(required=False)


class AbsenceSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    reason = serializers.CharField()
    duration_days = serializers.IntegerField()


class MemberStatusSerializer(serializers.Serializer):
    user = UserMinimalSerializer()
    is_available = serializers.BooleanField()
    current_absence = AbsenceSerializer(allow_null=True)
