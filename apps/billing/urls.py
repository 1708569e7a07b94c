from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ChargeViewSet

app_name = 'billing'

router = DefaultRouter()
router.register(r'charges', ChargeViewSet, basename='charge')

urlpatterns = [
    # GET    /api/billing/charges/                   - List charges
    # POST   /api/billing/charges/                   - Record charge
    # DELETE /api/billing/charges/{id}/              - Void charge
    # POST   /api/billing/charges/{id}/mark_paid/    - Settle charge
    # GET    /api/billing/charges/outstanding/       - Unpaid charges
    path('', include(router.urls)),
]
