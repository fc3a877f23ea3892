"""ORM models."""

from care_payroll.models.base import Base, TimestampMixin
from care_payroll.models.care import CareTeamMember, PayrollEntry, WorkLog, WorkLogExpense

__all__ = [
    "Base",
    "TimestampMixin",
    "CareTeamMember",
    "PayrollEntry",
    "WorkLog",
    "WorkLogExpense",
]
