from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import Organization
from .serializers import (
    OrganizationSerializer,
    OrganizationCreateSerializer,
    OrganizationUpdateSerializer,
    OrganizationListSerializer,
    OrganizationMemberSerializer,
    JoinOrganizationSerializer,
    UpdateMemberRoleSerializer,
    MemberReferenceSerializer,
    InviteCodeSerializer,
)
from .permissions import IsOrganizationAdmin, IsOrganizationOwner
from .services import (
    create_organization,
    update_organization,
    delete_organization,
    join_organization,
    leave_organization,
    remove_member,
    get_organization_members,
    update_member_role,
    regenerate_invite_code,
)


class OrganizationPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class OrganizationViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Organization CRUD and membership operations.

    Views are thin HTTP handlers; services raise domain errors which the
    project exception handler turns into responses.

    list: Organizations the user belongs to
    create: Create an organization (creator becomes owner)
    retrieve: Organization details
    update / partial_update: Admin only
    destroy: Owner only
    """

    serializer_class = OrganizationSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = OrganizationPagination
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        """Only organizations where the user is a member."""
        return Organization.objects.filter(
            memberships__user=self.request.user
        ).select_related('owner').prefetch_related('memberships').distinct()

    def get_serializer_class(self):
        if self.action == 'list':
            return OrganizationListSerializer
        elif self.action == 'create':
            return OrganizationCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return OrganizationUpdateSerializer
        return OrganizationSerializer

    def get_permissions(self):
        if self.action in ['update', 'partial_update', 'regenerate_invite',
                           'update_member_role', 'remove_member']:
            return [IsAuthenticated(), IsOrganizationAdmin()]
        if self.action == 'destroy':
            return [IsAuthenticated(), IsOrganizationOwner()]
        return [IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        organization = create_organization(owner=request.user, **serializer.validated_data)

        output_serializer = OrganizationSerializer(organization, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        organization = self.get_object()
        serializer = OrganizationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        organization = update_organization(
            organization_id=organization.id,
            user=request.user,
            **serializer.validated_data
        )

        return Response(OrganizationSerializer(organization, context={'request': request}).data)

    def destroy(self, request, *args, **kwargs):
        organization = self.get_object()
        delete_organization(organization_id=organization.id, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        """All members of the organization."""
        organization = self.get_object()
        memberships = get_organization_members(organization_id=organization.id)
        return Response(OrganizationMemberSerializer(memberships, many=True).data)

    @extend_schema(request=JoinOrganizationSerializer, responses={201: OrganizationMemberSerializer})
    @action(detail=False, methods=['post'])
    def join(self, request):
        """Join an organization using its invite code."""
        serializer = JoinOrganizationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        membership = join_organization(
            invite_code=serializer.validated_data['invite_code'],
            user=request.user
        )
        return Response(OrganizationMemberSerializer(membership).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def leave(self, request, pk=None):
        organization = self.get_object()
        leave_organization(organization_id=organization.id, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: InviteCodeSerializer})
    @action(detail=True, methods=['post'])
    def regenerate_invite(self, request, pk=None):
        """Regenerate invite code (admin only)."""
        organization = self.get_object()
        new_code = regenerate_invite_code(organization_id=organization.id, user=request.user)
        return Response({'invite_code': new_code})

    @extend_schema(request=UpdateMemberRoleSerializer, responses={200: OrganizationMemberSerializer})
    @action(detail=True, methods=['post'])
    def update_member_role(self, request, pk=None):
        """Update a member's role (admin only)."""
        organization = self.get_object()
        serializer = UpdateMemberRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        membership = update_member_role(
            organization_id=organization.id,
            user_id=serializer.validated_data['user_id'],
            new_role=serializer.validated_data['role'],
            updated_by=request.user
        )
        return Response(OrganizationMemberSerializer(membership).data)

    @extend_schema(request=MemberReferenceSerializer, responses={204: None})
    @action(detail=True, methods=['post'])
    def remove_member(self, request, pk=None):
        """Remove a member from the organization (admin only)."""
        organization = self.get_object()
        serializer = MemberReferenceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        remove_member(
            organization_id=organization.id,
            user_id=serializer.validated_data['user_id'],
            removed_by=request.user
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    responses={200: OrganizationListSerializer(many=True)},
    description="Get all organizations where the current user is a member.",
    tags=['organizations'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_organizations(request):
    organizations = Organization.objects.filter(
        memberships__user=request.user
    ).select_related('owner').distinct()

    serializer = OrganizationListSerializer(organizations, many=True, context={'request': request})
    return Response(serializer.data)
