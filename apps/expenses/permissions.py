"""Permission classes for expenses."""
from rest_framework.permissions import BasePermission


class IsOrganizationMemberForExpense(BasePermission):
    """
    Allows access to an expense only to members of its organization.
    """

    message = 'You must be a member of this organization to view this expense.'

    def has_object_permission(self, request, view, obj):
        return obj.organization.has_member(request.user)
