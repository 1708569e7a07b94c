from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Dashboard
    path('dashboard/', views.dashboard, name='dashboard'),

    # Revenue
    path('revenue/', views.total_revenue, name='total-revenue'),
    path('revenue/daily/', views.daily_revenue, name='daily-revenue'),
    path('revenue/by-service/', views.revenue_by_service, name='revenue-by-service'),
    path('revenue/top-clients/', views.top_clients, name='top-clients'),
    path('revenue/goal/', views.goal_progress, name='goal-progress'),
    path('revenue/growth/', views.revenue_growth, name='revenue-growth'),

    # Planning
    path('projection/', views.projection, name='projection'),

    # CSV export (owners, dogs, appointments, charges)
    path('export/<slug:entity>/', views.export_entity, name='export'),
]
