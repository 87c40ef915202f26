from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.availability import services as availability_services
from apps.common.periods import month_bounds
from apps.organizations.services import get_member_organization, get_split_eligible_members
from .models import Expense
from .permissions import IsOrganizationMemberForExpense
from .serializers import (
    ExpenseSerializer,
    ExpenseListSerializer,
    ExpenseCreateSerializer,
    ExpenseUpdateSerializer,
    ExpenseFilterSerializer,
    ExpenseCreateResponseSerializer,
    ExpenseSummarySerializer,
    ExpenseStatsSerializer,
    ExpenseSplitSerializer,
    MarkPaidInputSerializer,
    AvailableMembersQuerySerializer,
    AvailableMembersSerializer,
    StatsQuerySerializer,
)
from .services import ExpenseSplitService


class ExpensePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def filter_expenses(queryset, params):
    """Apply validated ExpenseFilterSerializer params to a queryset."""
    if 'category' in params:
        queryset = queryset.filter(category=params['category'])
    if 'status' in params:
        queryset = queryset.filter(status=params['status'])
    if 'paid_by' in params:
        queryset = queryset.filter(paid_by_id=params['paid_by'])
    if 'date_from' in params:
        queryset = queryset.filter(expense_date__gte=params['date_from'])
    if 'date_to' in params:
        queryset = queryset.filter(expense_date__lte=params['date_to'])
    if 'year' in params:
        first_day, last_day = month_bounds(params['year'], params['month'])
        queryset = queryset.filter(expense_date__range=(first_day, last_day))
    return queryset


class ExpenseViewSet(viewsets.ModelViewSet):
    """
    ViewSet for shared expenses.

    list: Expenses of the user's organizations (filterable)
    create: Record an expense; splits are computed from availability
    retrieve: Expense with its split lines
    partial_update: Change description, category or notes
    destroy: Creator or organization admin
    """

    serializer_class = ExpenseSerializer
    permission_classes = [IsAuthenticated, IsOrganizationMemberForExpense]
    pagination_class = ExpensePagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        user = self.request.user
        queryset = (
            Expense.objects
            .filter(organization__memberships__user=user)
            .select_related('paid_by', 'created_by', 'organization')
            .prefetch_related('splits__user')
        )

        if self.action != 'list':
            return queryset

        filter_serializer = ExpenseFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'organization' in params:
            organization = get_member_organization(organization_id=params['organization'], user=user)
            queryset = queryset.filter(organization=organization)

        return filter_expenses(queryset, params)

    def get_serializer_class(self):
        if self.action == 'list':
            return ExpenseListSerializer
        elif self.action == 'create':
            return ExpenseCreateSerializer
        elif self.action == 'partial_update':
            return ExpenseUpdateSerializer
        return ExpenseSerializer

    @extend_schema(request=ExpenseCreateSerializer, responses={201: ExpenseCreateResponseSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ExpenseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        organization = get_member_organization(organization_id=data['organization'], user=request.user)

        expense, warnings = ExpenseSplitService.create_expense(
            organization=organization,
            paid_by=data.get('paid_by', request.user),
            amount=data['amount'],
            expense_date=data['expense_date'],
            description=data['description'],
            category=data['category'],
            notes=data['notes'],
            currency=data.get('currency'),
            created_by=request.user,
        )

        return Response(
            {'expense': ExpenseSerializer(expense).data, 'warnings': warnings},
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=ExpenseUpdateSerializer, responses={200: ExpenseSerializer})
    def partial_update(self, request, *args, **kwargs):
        expense = self.get_object()
        serializer = ExpenseUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        expense = ExpenseSplitService.update_expense(expense, request.user, **serializer.validated_data)
        return Response(ExpenseSerializer(expense).data)

    def destroy(self, request, *args, **kwargs):
        ExpenseSplitService.delete_expense(self.get_object(), request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: ExpenseSummarySerializer})
    @action(detail=True, methods=['get'])
    def summary(self, request, pk=None):
        """
        Collected and outstanding amounts.

        GET /api/expenses/{id}/summary/
        """
        expense = self.get_object()
        summary = ExpenseSplitService.get_expense_summary(expense.id)
        return Response(ExpenseSummarySerializer(summary).data)

    @extend_schema(request=MarkPaidInputSerializer, responses={200: ExpenseSplitSerializer})
    @action(detail=True, methods=['post'])
    def mark_paid(self, request, pk=None):
        """
        Mark a participant's line as paid.

        POST /api/expenses/{id}/mark_paid/
        Body: {"user": "<uuid>"} (optional, defaults to the caller)
        """
        expense = self.get_object()
        serializer = MarkPaidInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        split = ExpenseSplitService.mark_split_paid(
            expense_id=expense.id,
            user_id=serializer.validated_data.get('user', request.user.id),
            marked_by=request.user,
        )
        return Response(ExpenseSplitSerializer(split).data)

    @extend_schema(
        parameters=[StatsQuerySerializer],
        responses={200: ExpenseStatsSerializer},
    )
    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Count, total, average, max and min, overall and per category.

        GET /api/expenses/stats/?organization=<id>[&year=&month=|&date_from=&date_to=]
        """
        query = StatsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        organization = get_member_organization(organization_id=params['organization'], user=request.user)
        queryset = filter_expenses(Expense.objects.filter(organization=organization), params)

        stats = ExpenseSplitService.get_expense_stats(queryset)
        return Response(ExpenseStatsSerializer(stats).data)

    @extend_schema(
        parameters=[
            OpenApiParameter('organization', str, required=True),
            OpenApiParameter('date', str, required=True, description='YYYY-MM-DD'),
        ],
        responses={200: AvailableMembersSerializer},
    )
    @action(detail=False, methods=['get'])
    def available_members(self, request):
        """
        Who an expense on ``date`` would be split between.

        GET /api/expenses/available_members/?organization=<id>&date=YYYY-MM-DD
        """
        query = AvailableMembersQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        organization = get_member_organization(
            organization_id=query.validated_data['organization'],
            user=request.user
        )
        eligible = get_split_eligible_members(organization=organization)
        result = availability_services.available_members(query.validated_data['date'], eligible)

        return Response(AvailableMembersSerializer(result._asdict()).data)
