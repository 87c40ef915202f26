from django.shortcuts import get_object_or_404
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.organizations.models import Organization
from .permissions import IsOrganizationMemberForSettlement
from .queries import SettlementQueries
from .serializers import MonthlySettlementSerializer, ErrorSerializer


@extend_schema(
    responses={
        200: MonthlySettlementSerializer,
        400: ErrorSerializer,
        403: ErrorSerializer,
        500: ErrorSerializer,
    },
    description=(
        "Per-member balances for a calendar month and the transfers that "
        "settle them. Fails with kind 'inconsistent' if the ledger does not reconcile."
    ),
    tags=['settlements'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsOrganizationMemberForSettlement])
def monthly_settlement(request, organization_id, year, month):
    """Monthly settlement - thin HTTP handler."""
    organization = get_object_or_404(Organization, id=organization_id)

    report = SettlementQueries.monthly_settlement(organization, year, month)
    return Response(MonthlySettlementSerializer(report).data)


@extend_schema(
    responses={200: MonthlySettlementSerializer, 403: ErrorSerializer},
    description="Settlement for the current calendar month.",
    tags=['settlements'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsOrganizationMemberForSettlement])
def current_settlement(request, organization_id):
    organization = get_object_or_404(Organization, id=organization_id)
    today = timezone.localdate()

    report = SettlementQueries.monthly_settlement(organization, today.year, today.month)
    return Response(MonthlySettlementSerializer(report).data)
