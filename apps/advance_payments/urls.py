from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'advance_payments'

router = DefaultRouter()
router.register(r'', views.AdvancePaymentViewSet, basename='advance-payment')

urlpatterns = [
    # GET    /api/advance-payments/               - List payments
    # POST   /api/advance-payments/               - Record a payment
    # GET    /api/advance-payments/{id}/          - Payment details
    # DELETE /api/advance-payments/{id}/          - Delete (adder or admin)
    # POST   /api/advance-payments/{id}/review/   - Approve / reject (admin)
    path('', include(router.urls)),
]
