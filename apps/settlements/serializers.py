"""
Response serializers for settlement endpoints.

These document the API and format the plain dictionaries returned by
SettlementQueries.
"""

from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer


class MemberBalanceSerializer(serializers.Serializer):
    user = UserMinimalSerializer()
    owes = serializers.DecimalField(max_digits=14, decimal_places=2)
    owed = serializers.DecimalField(max_digits=14, decimal_places=2)
    advance_paid = serializers.DecimalField(max_digits=14, decimal_places=2)
    advance_received = serializers.DecimalField(max_digits=14, decimal_places=2)
    net = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text='Positive: owes the group. Negative: is owed.'
    )


class TransferSerializer(serializers.Serializer):
    from_user = UserMinimalSerializer()
    to_user = UserMinimalSerializer()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class MonthlySettlementSerializer(serializers.Serializer):
    organization = serializers.UUIDField()
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    currency = serializers.CharField()
    total_expenses = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_advances = serializers.DecimalField(max_digits=14, decimal_places=2)
    balances = MemberBalanceSerializer(many=True)
    transfers = TransferSerializer(many=True)
    warnings = serializers.ListField(child=serializers.CharField())


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
    kind = serializers.CharField()
