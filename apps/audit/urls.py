from django.urls import path
from . import views

app_name = 'audit'

urlpatterns = [
    path('logs/', views.list_logs, name='log-list'),
    path('logs/<slug:name>/', views.recent_entries, name='log-recent'),
    path('logs/<slug:name>/export/', views.export_log, name='log-export'),
    path('logs/<slug:name>/clear/', views.clear_log, name='log-clear'),
]
