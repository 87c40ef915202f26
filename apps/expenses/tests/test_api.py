import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.expenses.models import Expense, ExpenseStatus


@pytest.mark.django_db
class TestExpenseCreate:
    """Tests for POST /api/expenses/"""

    def test_create_splits_and_returns_warnings(self, owner_client, organization_with_members):
        response = owner_client.post(reverse('expenses:expense-list'), {
            'organization': str(organization_with_members.id),
            'amount': '100.00',
            'expense_date': '2025-03-05',
            'description': 'Groceries',
            'category': 'groceries',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['warnings'] == []
        lines = sorted(Decimal(line['amount']) for line in response.data['expense']['split_between'])
        assert lines == [Decimal('33.33'), Decimal('33.33'), Decimal('33.34')]

    def test_negative_amount(self, owner_client, organization_with_members):
        response = owner_client.post(reverse('expenses:expense-list'), {
            'organization': str(organization_with_members.id),
            'amount': '-1.00',
            'expense_date': '2025-03-05',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['kind'] == 'validation'
        assert Expense.objects.count() == 0

    def test_cook_cannot_create(self, cook_client, organization_with_members):
        response = cook_client.post(reverse('expenses:expense-list'), {
            'organization': str(organization_with_members.id),
            'amount': '12.00',
            'expense_date': '2025-03-05',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_outsider_cannot_create(self, outsider_client, organization_with_members):
        response = outsider_client.post(reverse('expenses:expense-list'), {
            'organization': str(organization_with_members.id),
            'amount': '12.00',
            'expense_date': '2025-03-05',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unauthenticated(self, api_client):
        response = api_client.post(reverse('expenses:expense-list'), {})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestExpenseList:

    def test_list_filters_by_month(self, member_client, grocery_expense, organization_with_members):
        url = reverse('expenses:expense-list')

        march = member_client.get(url, {'organization': str(organization_with_members.id), 'year': 2025, 'month': 3})
        april = member_client.get(url, {'organization': str(organization_with_members.id), 'year': 2025, 'month': 4})

        assert march.data['count'] == 1
        assert april.data['count'] == 0

    def test_year_without_month(self, member_client, grocery_expense):
        response = member_client.get(reverse('expenses:expense-list'), {'year': 2025})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_year_out_of_range(self, member_client, grocery_expense):
        response = member_client.get(reverse('expenses:expense-list'), {'year': 10000, 'month': 1})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'year' in response.data

    def test_filter_by_status(self, member_client, grocery_expense):
        url = reverse('expenses:expense-list')

        response = member_client.get(url, {'status': ExpenseStatus.FULLY_PAID})

        assert response.data['count'] == 0

    def test_outsider_sees_nothing(self, outsider_client, grocery_expense):
        response = outsider_client.get(reverse('expenses:expense-list'))

        assert response.data['count'] == 0

    def test_retrieve_by_outsider(self, outsider_client, grocery_expense):
        response = outsider_client.get(reverse('expenses:expense-detail', args=[grocery_expense.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestExpenseActions:

    def test_mark_own_line_paid_twice(self, member_client, grocery_expense):
        url = reverse('expenses:expense-mark-paid', args=[grocery_expense.id])

        first = member_client.post(url)
        second = member_client.post(url)

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_200_OK
        assert first.data['paid_at'] == second.data['paid_at']
        grocery_expense.refresh_from_db()
        assert grocery_expense.status == ExpenseStatus.PARTIALLY_PAID

    def test_summary(self, owner_client, grocery_expense):
        response = owner_client.get(reverse('expenses:expense-summary', args=[grocery_expense.id]))

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['outstanding_amount']) == Decimal('66.66')

    def test_patch_descriptive_fields(self, owner_client, grocery_expense):
        url = reverse('expenses:expense-detail', args=[grocery_expense.id])

        response = owner_client.patch(url, {'notes': 'Receipt in the drawer'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['notes'] == 'Receipt in the drawer'

    def test_amount_cannot_be_patched(self, owner_client, grocery_expense):
        url = reverse('expenses:expense-detail', args=[grocery_expense.id])

        owner_client.patch(url, {'amount': '1.00'})

        grocery_expense.refresh_from_db()
        assert grocery_expense.amount == Decimal('100.00')

    def test_delete_by_member_forbidden(self, member_client, grocery_expense):
        response = member_client.delete(reverse('expenses:expense-detail', args=[grocery_expense.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_by_creator(self, owner_client, grocery_expense):
        response = owner_client.delete(reverse('expenses:expense-detail', args=[grocery_expense.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_stats(self, member_client, grocery_expense, organization_with_members):
        response = member_client.get(
            reverse('expenses:expense-stats'),
            {'organization': str(organization_with_members.id)},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['overall']['count'] == 1
        assert response.data['by_category'][0]['category'] == 'groceries'

    def test_available_members(self, member_client, organization_with_members, member_user, away):
        away(member_user)

        response = member_client.get(reverse('expenses:expense-available-members'), {
            'organization': str(organization_with_members.id),
            'date': '2025-03-05',
        })

        assert response.status_code == status.HTTP_200_OK
        emails = {member['email'] for member in response.data['members']}
        assert emails == {'owner@example.com', 'admin@example.com'}
        assert response.data['warnings'] == []
