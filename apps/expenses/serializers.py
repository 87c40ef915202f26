from rest_framework import serializers

from apps.accounts.models import User
from apps.accounts.serializers import UserMinimalSerializer
from .models import Expense, ExpenseSplit, ExpenseCategory, ExpenseStatus


# =============================================================================
# Input Serializers
# =============================================================================

class ExpenseFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for expense filtering.

    Query Parameters:
        organization (UUID): Limit to one organization
        category (str): Expense category
        status (str): pending / partially_paid / fully_paid
        paid_by (UUID): Payer
        date_from, date_to (date): Inclusive date range
        year, month (int): Calendar month (both required together)
    """

    organization = serializers.UUIDField(required=False)
    category = serializers.ChoiceField(choices=ExpenseCategory.choices, required=False)
    status = serializers.ChoiceField(choices=ExpenseStatus.choices, required=False)
    paid_by = serializers.UUIDField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    year = serializers.IntegerField(required=False, min_value=1, max_value=9999)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)

    def validate(self, attrs):
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })

        if ('year' in attrs) != ('month' in attrs):
            raise serializers.ValidationError('year and month must be given together')

        return attrs


class ExpenseCreateSerializer(serializers.Serializer):
    organization = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    expense_date = serializers.DateField()
    paid_by = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    category = serializers.ChoiceField(choices=ExpenseCategory.choices, default=ExpenseCategory.OTHER)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    currency = serializers.CharField(min_length=3, max_length=3, required=False)


class ExpenseUpdateSerializer(serializers.Serializer):
    """Only descriptive fields; split lines are frozen."""

    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=ExpenseCategory.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class MarkPaidInputSerializer(serializers.Serializer):
    """``user`` defaults to the caller's own line."""

    user = serializers.UUIDField(required=False)


class AvailableMembersQuerySerializer(serializers.Serializer):
    organization = serializers.UUIDField()
    date = serializers.DateField()


class StatsQuerySerializer(ExpenseFilterSerializer):
    organization = serializers.UUIDField()


# =============================================================================
# Output Serializers
# =============================================================================

class ExpenseSplitSerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = ExpenseSplit
        fields = ['id', 'user', 'amount', 'paid', 'paid_at']
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    paid_by = UserMinimalSerializer(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)
    split_between = ExpenseSplitSerializer(source='splits', many=True, read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id',
            'organization',
            'amount',
            'currency',
            'description',
            'category',
            'paid_by',
            'expense_date',
            'notes',
            'status',
            'split_between',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ExpenseListSerializer(serializers.ModelSerializer):
    paid_by = UserMinimalSerializer(read_only=True)
    participant_count = serializers.SerializerMethodField()

    class Meta:
        model = Expense
        fields = [
            'id',
            'organization',
            'amount',
            'currency',
            'description',
            'category',
            'paid_by',
            'expense_date',
            'status',
            'participant_count',
        ]
        read_only_fields = fields

    def get_participant_count(self, obj):
        return len(obj.splits.all())


class ExpenseCreateResponseSerializer(serializers.Serializer):
    expense = ExpenseSerializer()
    warnings = serializers.ListField(child=serializers.CharField())


class ExpenseSummarySerializer(serializers.Serializer):
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    collected_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    outstanding_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    is_fully_paid = serializers.BooleanField()
    total_shares = serializers.IntegerField()
    paid_count = serializers.IntegerField()
    unpaid_count = serializers.IntegerField()
    paid_shares = ExpenseSplitSerializer(many=True)
    unpaid_shares = ExpenseSplitSerializer(many=True)


class StatsRowSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    average = serializers.DecimalField(max_digits=14, decimal_places=2)
    maximum = serializers.DecimalField(max_digits=14, decimal_places=2)
    minimum = serializers.DecimalField(max_digits=14, decimal_places=2)


class CategoryStatsRowSerializer(StatsRowSerializer):
    category = serializers.CharField()


class ExpenseStatsSerializer(serializers.Serializer):
    overall = StatsRowSerializer()
    by_category = CategoryStatsRowSerializer(many=True)


class AvailableMembersSerializer(serializers.Serializer):
    members = UserMinimalSerializer(many=True)
    warnings = serializers.ListField(child=serializers.CharField())
