from rest_framework import serializers

from apps.accounts.models import User
from apps.accounts.serializers import UserMinimalSerializer
from .models import AdvancePayment, AdvancePaymentStatus


class AdvancePaymentSerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(read_only=True)
    received_by = UserMinimalSerializer(read_only=True)
    added_by = UserMinimalSerializer(read_only=True)
    reviewed_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = AdvancePayment
        fields = [
            'id',
            'organization',
            'user',
            'received_by',
            'amount',
            'payment_date',
            'description',
            'status',
            'added_by',
            'reviewed_by',
            'reviewed_at',
            'created_at',
        ]
        read_only_fields = fields


class AdvancePaymentCreateSerializer(serializers.Serializer):
    """``user`` defaults to the caller, ``received_by`` to the owner."""

    organization = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_date = serializers.DateField()
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False)
    received_by = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class AdvancePaymentFilterSerializer(serializers.Serializer):
    organization = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=AdvancePaymentStatus.choices, required=False)
    user = serializers.UUIDField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)


class ReviewInputSerializer(serializers.Serializer):
    approve = serializers.BooleanField()
