from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'tags'

router = DefaultRouter()
router.register(r'', views.TagViewSet, basename='tag')

urlpatterns = [
    # GET    /api/tags/              - List / search tags
    # POST   /api/tags/              - Create tag
    # PATCH  /api/tags/{id}/         - Edit tag
    # DELETE /api/tags/{id}/         - Delete tag (escalated audit)
    # POST   /api/tags/{id}/apply/   - Attach to an owner
    # GET    /api/tags/audit/        - Recent tag audit events
    path('', include(router.urls)),
]
