from rest_framework import permissions, views

from core.utils import success_response
from .serializers import DashboardStatsSerializer
from .services import DashboardService


class DashboardStatsView(views.APIView):
    """Get current dashboard metrics."""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        serializer = DashboardStatsSerializer(DashboardService.get_dashboard_stats())
        return success_response("Dashboard statistics retrieved successfully", data=serializer.data)


class HealthStatusView(views.APIView):
    """Coarse system health signal."""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return success_response(
            "System health status retrieved successfully",
            data=DashboardService.get_health_status()
        )
