from django.contrib import admin
from apps.advance_payments.models import AdvancePayment


@admin.register(AdvancePayment)
class AdvancePaymentAdmin(admin.ModelAdmin):
    list_display = ['payment_date', 'organization', 'user', 'received_by', 'amount', 'status']
    list_filter = ['status', 'payment_date']
    search_fields = ['user__email', 'received_by__email', 'organization__name', 'description']
    readonly_fields = ['created_at', 'reviewed_at']
    date_hierarchy = 'payment_date'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('organization', 'user', 'received_by')
