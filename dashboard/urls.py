from django.urls import path
from .views import DashboardStatsView, HealthStatusView

app_name = 'dashboard'

urlpatterns = [
    path('stats/', DashboardStatsView.as_view(), name='stats'),
    path('health/', HealthStatusView.as_view(), name='health'),
]
