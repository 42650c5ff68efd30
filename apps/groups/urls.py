from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'groups'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # GET    /api/groups/                          - List user's groups
    # POST   /api/groups/                          - Create group
    # POST   /api/groups/join/                     - Join with invite code
    # GET    /api/groups/{id}/                     - Get group details (members)
    # GET    /api/groups/{id}/members/             - List members in join order
    # POST   /api/groups/{id}/leave/               - Leave group
    # POST   /api/groups/{id}/regenerate_invite/   - Regenerate invite code (creator)
    path('', include(router.urls)),
]
