from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'users'

router = DefaultRouter()
router.register(r'users', views.UserAdminViewSet, basename='user')

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('logout/', views.logout, name='logout'),

    # User profile
    path('user/', views.get_current_user, name='current-user'),
    path('user/update/', views.update_profile, name='update-profile'),

    # Staff management (owners and admins)
    # GET  /api/auth/users/                 - List staff accounts
    # POST /api/auth/users/{id}/enable/     - Re-enable account
    # POST /api/auth/users/{id}/suspend/    - Suspend account
    # POST /api/auth/users/{id}/badges/     - Add badge (DELETE removes)
    path('', include(router.urls)),
]
