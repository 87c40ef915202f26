import pytest
from django.urls import reverse
from rest_framework import status

from apps.advance_payments.models import AdvancePaymentStatus


@pytest.mark.django_db
class TestAdvancePaymentAPI:

    def test_create(self, member_client, organization_with_members, owner):
        response = member_client.post(reverse('advance_payments:advance-payment-list'), {
            'organization': str(organization_with_members.id),
            'amount': '300.00',
            'payment_date': '2025-03-01',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == AdvancePaymentStatus.APPROVED
        assert response.data['received_by']['id'] == str(owner.id)

    def test_create_zero_amount(self, member_client, organization_with_members):
        response = member_client.post(reverse('advance_payments:advance-payment-list'), {
            'organization': str(organization_with_members.id),
            'amount': '0.00',
            'payment_date': '2025-03-01',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_filters_by_status(self, owner_client, pending_payment, reviewed_organization):
        url = reverse('advance_payments:advance-payment-list')

        pending = owner_client.get(url, {'organization': str(reviewed_organization.id), 'status': 'pending'})
        approved = owner_client.get(url, {'organization': str(reviewed_organization.id), 'status': 'approved'})

        assert pending.data['count'] == 1
        assert approved.data['count'] == 0

    def test_review_by_admin(self, admin_client, pending_payment):
        url = reverse('advance_payments:advance-payment-review', args=[pending_payment.id])

        response = admin_client.post(url, {'approve': True})
        again = admin_client.post(url, {'approve': True})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == AdvancePaymentStatus.APPROVED
        assert again.status_code == status.HTTP_409_CONFLICT

    def test_review_by_member_forbidden(self, member_client, pending_payment):
        url = reverse('advance_payments:advance-payment-review', args=[pending_payment.id])

        response = member_client.post(url, {'approve': True})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_outsider_cannot_see_payment(self, outsider_client, pending_payment):
        url = reverse('advance_payments:advance-payment-detail', args=[pending_payment.id])

        response = outsider_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
