import logging

from bloodrequests.services import BloodRequestService
from core.conf import get_setting
from donors.services import DonorService
from inventory.services import InventoryService

logger = logging.getLogger(__name__)

HEALTHY = 'HEALTHY'
WARNING = 'WARNING'
CRITICAL = 'CRITICAL'


def classify_health(emergency_requests, overdue_requests, critical_shortages):
    """Emergencies and overdue backlog outrank stock shortages"""
    if emergency_requests > 0 or overdue_requests > get_setting('OVERDUE_CRITICAL_THRESHOLD'):
        return CRITICAL
    if critical_shortages > get_setting('SHORTAGE_WARNING_THRESHOLD'):
        return WARNING
    return HEALTHY


class DashboardService:
    """Read-only figures composed from the donor, inventory and request services"""

    @classmethod
    def get_dashboard_stats(cls):
        logger.info("Fetching dashboard statistics")
        return {
            'total_donors': DonorService.count(),
            'eligible_donors': DonorService.eligible_count(),
            'total_blood_units': InventoryService.total_units(),
            'critical_shortages': len(InventoryService.critical_shortages()),
            'pending_requests': BloodRequestService.pending_count(),
            'emergency_requests': BloodRequestService.emergency_pending_count(),
            'today_requests': BloodRequestService.created_today_count(),
            # Donors with a donation in the recent-donor window, not literally today
            'today_donations': DonorService.recent_count(),
        }

    @classmethod
    def get_health_status(cls):
        logger.info("Checking system health status")
        return classify_health(
            BloodRequestService.emergency_pending_count(),
            BloodRequestService.overdue_pending_count(),
            len(InventoryService.critical_shortages()),
        )
