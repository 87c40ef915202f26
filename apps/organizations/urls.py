from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'organizations'

router = DefaultRouter()
router.register(r'', views.OrganizationViewSet, basename='organization')

urlpatterns = [
    # GET    /api/organizations/                               - List user's organizations
    # POST   /api/organizations/                               - Create organization
    # GET    /api/organizations/{id}/                          - Organization details
    # PATCH  /api/organizations/{id}/                          - Update (admin)
    # DELETE /api/organizations/{id}/                          - Delete (owner)
    # GET    /api/organizations/{id}/members/                  - List members
    # POST   /api/organizations/join/                          - Join with invite code
    # POST   /api/organizations/{id}/leave/                    - Leave organization
    # POST   /api/organizations/{id}/regenerate_invite/        - New invite code (admin)
    # POST   /api/organizations/{id}/update_member_role/       - Change role (admin)
    # POST   /api/organizations/{id}/remove_member/            - Remove member (admin)
    path('my/', views.my_organizations, name='my-organizations'),

    path('', include(router.urls)),
]
