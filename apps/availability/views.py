from django.db.models import Q
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.organizations.services import get_member_organization
from .models import AvailabilityRecord
from .serializers import (
    AvailabilityRecordSerializer,
    AvailabilityCreateSerializer,
    AvailabilityFilterSerializer,
    StatusQuerySerializer,
    MemberStatusSerializer,
)
from .services import create_availability, cancel_availability, current_status


class AvailabilityPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class AvailabilityViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet
):
    """
    Member absences.

    list: Own absences, or those of an organization's members (?organization=)
    create: Record an absence (self, or a member you administer)
    retrieve: Absence details
    cancel: Retire an absence
    status: Who is home on a date
    """

    serializer_class = AvailabilityRecordSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = AvailabilityPagination

    def get_queryset(self):
        user = self.request.user
        queryset = AvailabilityRecord.objects.select_related('user', 'created_by')

        if self.action != 'list':
            # Records visible to anyone sharing an organization with their owner
            return queryset.filter(
                Q(user=user) |
                Q(user__organization_memberships__organization__memberships__user=user)
            ).distinct()

        filter_serializer = AvailabilityFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'organization' in params:
            organization = get_member_organization(organization_id=params['organization'], user=user)
            queryset = queryset.filter(user__organization_memberships__organization=organization)
        else:
            queryset = queryset.filter(user=user)

        if 'user' in params:
            queryset = queryset.filter(user_id=params['user'])
        if 'status' in params:
            queryset = queryset.filter(status=params['status'])
        if 'date' in params:
            queryset = queryset.filter(start_date__lte=params['date'], end_date__gte=params['date'])

        return queryset

    def get_serializer_class(self):
        if self.action == 'create':
            return AvailabilityCreateSerializer
        return AvailabilityRecordSerializer

    @extend_schema(request=AvailabilityCreateSerializer, responses={201: AvailabilityRecordSerializer})
    def create(self, request, *args, **kwargs):
        serializer = AvailabilityCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        record = create_availability(
            user=data.get('user', request.user),
            start_date=data['start_date'],
            end_date=data['end_date'],
            reason=data['reason'],
            created_by=request.user,
        )
        return Response(AvailabilityRecordSerializer(record).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: AvailabilityRecordSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        record = cancel_availability(record=self.get_object(), user=request.user)
        return Response(AvailabilityRecordSerializer(record).data)

    @extend_schema(
        parameters=[
            OpenApiParameter('organization', str, required=True),
            OpenApiParameter('date', str, required=False, description='YYYY-MM-DD, defaults to today'),
        ],
        responses={200: MemberStatusSerializer(many=True)},
    )
    @action(detail=False, methods=['get'], url_path='status', url_name='status')
    def member_status(self, request):
        """
        Availability of every organization member on a date.

        GET /api/availability/status/?organization=<id>&date=YYYY-MM-DD
        """
        query = StatusQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        organization = get_member_organization(
            organization_id=query.validated_data['organization'],
            user=request.user
        )
        members = [
            membership.user
            for membership in organization.memberships.select_related('user').order_by('joined_at')
        ]
        statuses = current_status(members, query.validated_data.get('date'))
        return Response(MemberStatusSerializer(statuses, many=True).data)
