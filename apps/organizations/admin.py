from django.contrib import admin
from apps.organizations.models import Organization, OrganizationMembership, generate_invite_code


class OrganizationMembershipInline(admin.TabularInline):
    model = OrganizationMembership
    extra = 0
    fields = ['user', 'role', 'joined_at']
    readonly_fields = ['joined_at']


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = [
        'name',
        'owner',
        'member_count',
        'currency',
        'advance_payment_review_required',
        'created_at'
    ]
    list_filter = ['currency', 'advance_payment_review_required', 'created_at']
    search_fields = ['name', 'description', 'owner__email', 'invite_code']
    readonly_fields = ['invite_code', 'created_at', 'updated_at']
    inlines = [OrganizationMembershipInline]
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'owner')
        }),
        ('Ledger', {
            'fields': ('currency', 'advance_payment_review_required')
        }),
        ('Invitation', {
            'fields': ('invite_code',)
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['regenerate_invite_codes']

    @admin.display(description='Members')
    def member_count(self, obj):
        return obj.memberships.count()

    @admin.action(description='Regenerate invite codes')
    def regenerate_invite_codes(self, request, queryset):
        for organization in queryset:
            organization.invite_code = generate_invite_code()
            organization.save(update_fields=['invite_code', 'updated_at'])
        self.message_user(request, f"Regenerated invite codes for {queryset.count()} organizations")


@admin.register(OrganizationMembership)
class OrganizationMembershipAdmin(admin.ModelAdmin):
    list_display = ['user', 'organization', 'role', 'joined_at']
    list_filter = ['role', 'joined_at']
    search_fields = ['user__email', 'organization__name']
    readonly_fields = ['joined_at']
    ordering = ['-joined_at']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user', 'organization')
