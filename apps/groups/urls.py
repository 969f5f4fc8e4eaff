from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'groups'

# Router for ViewSets
router = SimpleRouter()
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # Group ViewSet routes
    # POST   /api/groups/              - Create group (switches into it)
    # GET    /api/groups/{id}/         - Get group details (members)

    # Custom group actions
    # GET    /api/groups/current/      - Current membership
    # POST   /api/groups/join/         - Join with invite code
    # POST   /api/groups/{id}/leave/   - Leave group
    # POST   /api/groups/{id}/invite/  - Issue invite code (owner)

    # Additional endpoints
    path('invites/<str:code>/', views.check_invite, name='check-invite'),

    # Include router URLs
    path('', include(router.urls)),
]
