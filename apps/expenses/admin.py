from django.contrib import admin
from apps.expenses.models import Expense, ExpenseSplit


class ExpenseSplitInline(admin.TabularInline):
    model = ExpenseSplit
    extra = 0
    fields = ['user', 'amount', 'paid', 'paid_at', 'marked_paid_by']
    readonly_fields = ['user', 'amount', 'paid_at']


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = [
        'expense_date',
        'organization',
        'description',
        'category',
        'amount',
        'currency',
        'paid_by',
        'status',
    ]
    list_filter = ['status', 'category', 'currency', 'expense_date']
    search_fields = ['description', 'notes', 'organization__name', 'paid_by__email']
    readonly_fields = ['amount', 'paid_by', 'expense_date', 'created_by', 'created_at', 'updated_at']
    inlines = [ExpenseSplitInline]
    date_hierarchy = 'expense_date'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('organization', 'paid_by')
