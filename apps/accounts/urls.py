from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),

    # User profile
    path('me/', views.get_current_user, name='current-user'),
    path('users/<uuid:pk>/', views.UserDetailView.as_view(), name='user-detail'),

    # Account deletion lifecycle
    path('deletion/', views.deletion, name='deletion'),
    path('deletion/cancel/', views.cancel_account_deletion, name='deletion-cancel'),
    path('recover/', views.recover, name='recover'),
]
