from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'availability'

router = DefaultRouter()
router.register(r'', views.AvailabilityViewSet, basename='availability')

urlpatterns = [
    # GET  /api/availability/                 - List absences
    # POST /api/availability/                 - Record an absence
    # GET  /api/availability/{id}/            - Absence details
    # POST /api/availability/{id}/cancel/     - Cancel an absence
    # GET  /api/availability/status/          - Member availability on a date
    path('', include(router.urls)),
]
