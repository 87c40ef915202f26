from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'expenses'

router = DefaultRouter()
router.register(r'', views.ExpenseViewSet, basename='expense')

urlpatterns = [
    # GET    /api/expenses/                      - List expenses (filterable)
    # POST   /api/expenses/                      - Create expense with splits
    # GET    /api/expenses/{id}/                 - Expense with split lines
    # PATCH  /api/expenses/{id}/                 - Update description/category/notes
    # DELETE /api/expenses/{id}/                 - Delete (creator or admin)
    # GET    /api/expenses/{id}/summary/         - Collected / outstanding
    # POST   /api/expenses/{id}/mark_paid/       - Mark a line paid
    # GET    /api/expenses/stats/                - Aggregates
    # GET    /api/expenses/available_members/    - Split preview for a date
    path('', include(router.urls)),
]
