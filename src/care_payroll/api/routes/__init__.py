"""API routes."""

from care_payroll.api.routes.health import router as health_router
from care_payroll.api.routes.payroll import router as payroll_router
from care_payroll.api.routes.work_logs import router as work_logs_router

__all__ = ["health_router", "payroll_router", "work_logs_router"]
