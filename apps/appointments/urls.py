from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import AppointmentViewSet, GroomingSessionViewSet

app_name = 'appointments'

router = DefaultRouter()
router.register(r'sessions', GroomingSessionViewSet, basename='session')
router.register(r'', AppointmentViewSet, basename='appointment')

urlpatterns = [
    path('', include(router.urls)),
]
