from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'owners'

# Note: dogs must be registered BEFORE empty prefix to avoid URL conflicts
router = DefaultRouter()
router.register(r'dogs', views.DogViewSet, basename='dog')
router.register(r'', views.DogOwnerViewSet, basename='owner')

urlpatterns = [
    # GET    /api/owners/                      - List / search owners
    # POST   /api/owners/                      - Create owner
    # GET    /api/owners/duplicates/           - Potential duplicates
    # POST   /api/owners/{id}/badges/          - Add badge (DELETE removes)
    # GET    /api/owners/{id}/audit_log/       - Audit trail
    # GET    /api/owners/{id}/export/          - JSON export
    # POST   /api/owners/{id}/deactivate/      - Deactivate
    # GET    /api/owners/dogs/                 - List dogs (?owner=)
    # POST   /api/owners/dogs/{id}/tags/       - Add tag (DELETE removes)
    path('', include(router.urls)),
]
