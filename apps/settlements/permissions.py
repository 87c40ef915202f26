"""
Permission classes for settlement endpoints.

Usage:
    @api_view(['GET'])
    @permission_classes([IsAuthenticated, IsOrganizationMemberForSettlement])
    def monthly_settlement(request, organization_id, year, month):
        ...
"""

from rest_framework.permissions import BasePermission
from apps.organizations.models import Organization


class IsOrganizationMemberForSettlement(BasePermission):
    """
    Requires membership of the organization named in the URL.

    A missing organization is reported as 403 as well, so the endpoint does
    not reveal which organization ids exist.
    """

    message = 'You must be a member of this organization to view its settlement.'

    def has_permission(self, request, view):
        organization_id = view.kwargs.get('organization_id')
        if not organization_id:
            return True

        return Organization.objects.filter(
            id=organization_id,
            memberships__user=request.user
        ).exists()
