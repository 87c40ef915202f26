from django.contrib import admin
from apps.availability.models import AvailabilityRecord


@admin.register(AvailabilityRecord)
class AvailabilityRecordAdmin(admin.ModelAdmin):
    list_display = ['user', 'start_date', 'end_date', 'status', 'reason', 'created_by']
    list_filter = ['status', 'start_date']
    search_fields = ['user__email', 'reason']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'start_date'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user', 'created_by')
