import pytest
from datetime import date
from decimal import Decimal

from apps.advance_payments.exceptions import (
    AdvancePaymentAlreadyReviewedError,
    AdvancePaymentPermissionError,
    InvalidAdvancePaymentError,
)
from apps.advance_payments.models import AdvancePayment, AdvancePaymentStatus
from apps.advance_payments.services import create_payment, delete_payment, review_payment


@pytest.mark.django_db
class TestCreatePayment:

    def test_approved_by_default_and_received_by_owner(self, organization_with_members, member_user, owner):
        payment = create_payment(
            organization=organization_with_members,
            user=member_user,
            amount=Decimal('150.00'),
            payment_date=date(2025, 3, 1),
            added_by=member_user,
        )

        assert payment.status == AdvancePaymentStatus.APPROVED
        assert payment.received_by == owner

    def test_pending_when_review_required(self, pending_payment):
        assert pending_payment.status == AdvancePaymentStatus.PENDING

    def test_explicit_receiver(self, organization_with_members, member_user, admin_user):
        payment = create_payment(
            organization=organization_with_members,
            user=member_user,
            received_by=admin_user,
            amount=Decimal('20.00'),
            payment_date=date(2025, 3, 1),
            added_by=member_user,
        )

        assert payment.received_by == admin_user

    @pytest.mark.parametrize('amount', [Decimal('0.00'), Decimal('-10.00')])
    def test_non_positive_amount(self, organization_with_members, member_user, amount):
        with pytest.raises(InvalidAdvancePaymentError):
            create_payment(
                organization=organization_with_members,
                user=member_user,
                amount=amount,
                payment_date=date(2025, 3, 1),
                added_by=member_user,
            )

    def test_payer_must_be_member(self, organization_with_members, outsider, owner):
        with pytest.raises(InvalidAdvancePaymentError):
            create_payment(
                organization=organization_with_members,
                user=outsider,
                amount=Decimal('10.00'),
                payment_date=date(2025, 3, 1),
                added_by=owner,
            )

    def test_member_cannot_record_for_others(self, organization_with_members, member_user, admin_user):
        with pytest.raises(AdvancePaymentPermissionError):
            create_payment(
                organization=organization_with_members,
                user=admin_user,
                amount=Decimal('10.00'),
                payment_date=date(2025, 3, 1),
                added_by=member_user,
            )

    def test_admin_records_for_member(self, organization_with_members, member_user, admin_user):
        payment = create_payment(
            organization=organization_with_members,
            user=member_user,
            amount=Decimal('10.00'),
            payment_date=date(2025, 3, 1),
            added_by=admin_user,
        )

        assert payment.added_by == admin_user


@pytest.mark.django_db
class TestReviewPayment:

    def test_approve(self, pending_payment, admin_user):
        payment = review_payment(payment=pending_payment, reviewer=admin_user, approve=True)

        assert payment.status == AdvancePaymentStatus.APPROVED
        assert payment.reviewed_by == admin_user
        assert payment.reviewed_at is not None

    def test_reject(self, pending_payment, owner):
        payment = review_payment(payment=pending_payment, reviewer=owner, approve=False)

        assert payment.status == AdvancePaymentStatus.REJECTED

    def test_review_twice_conflicts(self, pending_payment, owner):
        review_payment(payment=pending_payment, reviewer=owner, approve=True)

        with pytest.raises(AdvancePaymentAlreadyReviewedError):
            review_payment(payment=pending_payment, reviewer=owner, approve=False)

    def test_member_cannot_review(self, pending_payment, member_user):
        with pytest.raises(AdvancePaymentPermissionError):
            review_payment(payment=pending_payment, reviewer=member_user, approve=True)


@pytest.mark.django_db
class TestDeletePayment:

    def test_adder_deletes(self, pending_payment, member_user):
        delete_payment(payment=pending_payment, user=member_user)

        assert not AdvancePayment.objects.exists()

    def test_other_member_cannot_delete(self, pending_payment, cook_user):
        with pytest.raises(AdvancePaymentPermissionError):
            delete_payment(payment=pending_payment, user=cook_user)
