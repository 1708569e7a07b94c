from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'diagnostics'

router = DefaultRouter()
router.register(r'crashes', views.CrashReportViewSet, basename='crash')

urlpatterns = [
    path('updates/check/', views.check_updates, name='update-check'),
    path('updates/changelog/', views.changelog, name='changelog'),
    path('backup/', views.backup_export, name='backup-export'),
    path('backup/restore/', views.backup_restore, name='backup-restore'),
    path('', include(router.urls)),
]
