from rest_framework import permissions


class IsOrganizationAdmin(permissions.BasePermission):
    """
    Permission: User must be organization admin or owner.
    """

    def has_object_permission(self, request, view, obj):
        # obj is an Organization instance
        return obj.is_admin(request.user)


class IsOrganizationOwner(permissions.BasePermission):
    """
    Permission: User must be the organization owner.
    """

    def has_object_permission(self, request, view, obj):
        return obj.owner_id == request.user.id
