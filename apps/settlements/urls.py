from django.urls import path
from . import views

app_name = 'settlements'

urlpatterns = [
    path('<uuid:organization_id>/<int:year>/<int:month>/', views.monthly_settlement, name='monthly-settlement'),
    path('<uuid:organization_id>/current/', views.current_settlement, name='current-settlement'),
]
