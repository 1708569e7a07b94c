from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'loyalty'

router = DefaultRouter()
router.register(r'pools', views.RewardPoolViewSet, basename='pool')

urlpatterns = [
    path('owners/<uuid:owner_id>/', views.program_detail, name='program-detail'),
    path('owners/<uuid:owner_id>/points/', views.add_points, name='add-points'),
    path('owners/<uuid:owner_id>/redeem/', views.redeem, name='redeem'),
    path('owners/<uuid:owner_id>/badges/', views.badges, name='badges'),
    path('owners/<uuid:owner_id>/expiring/', views.expiring_rewards, name='expiring-rewards'),
    path('', include(router.urls)),
]
