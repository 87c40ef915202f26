from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.organizations.services import get_member_organization
from .models import AdvancePayment
from .serializers import (
    AdvancePaymentSerializer,
    AdvancePaymentCreateSerializer,
    AdvancePaymentFilterSerializer,
    ReviewInputSerializer,
)
from .services import create_payment, review_payment, delete_payment


class AdvancePaymentPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class AdvancePaymentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet
):
    """
    Advance payments.

    list: Payments in the user's organizations (?organization=&status=&user=)
    create: Record a payment
    retrieve: Payment details
    destroy: Adder or admin
    review: Approve or reject a pending payment (admin)
    """

    serializer_class = AdvancePaymentSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = AdvancePaymentPagination

    def get_queryset(self):
        user = self.request.user
        queryset = (
            AdvancePayment.objects
            .filter(organization__memberships__user=user)
            .select_related('organization', 'user', 'received_by', 'added_by', 'reviewed_by')
        )

        if self.action != 'list':
            return queryset

        filter_serializer = AdvancePaymentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'organization' in params:
            organization = get_member_organization(organization_id=params['organization'], user=user)
            queryset = queryset.filter(organization=organization)
        if 'status' in params:
            queryset = queryset.filter(status=params['status'])
        if 'user' in params:
            queryset = queryset.filter(user_id=params['user'])
        if 'date_from' in params:
            queryset = queryset.filter(payment_date__gte=params['date_from'])
        if 'date_to' in params:
            queryset = queryset.filter(payment_date__lte=params['date_to'])

        return queryset

    def get_serializer_class(self):
        if self.action == 'create':
            return AdvancePaymentCreateSerializer
        return AdvancePaymentSerializer

    @extend_schema(request=AdvancePaymentCreateSerializer, responses={201: AdvancePaymentSerializer})
    def create(self, request, *args, **kwargs):
        serializer = AdvancePaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        organization = get_member_organization(organization_id=data['organization'], user=request.user)
        payment = create_payment(
            organization=organization,
            user=data.get('user', request.user),
            received_by=data.get('received_by'),
            amount=data['amount'],
            payment_date=data['payment_date'],
            description=data['description'],
            added_by=request.user,
        )
        return Response(AdvancePaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        delete_payment(payment=self.get_object(), user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ReviewInputSerializer, responses={200: AdvancePaymentSerializer})
    @action(detail=True, methods=['post'])
    def review(self, request, pk=None):
        """
        POST /api/advance-payments/{id}/review/
        Body: {"approve": true}
        """
        serializer = ReviewInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = review_payment(
            payment=self.get_object(),
            reviewer=request.user,
            approve=serializer.validated_data['approve'],
        )
        return Response(AdvancePaymentSerializer(payment).data)
