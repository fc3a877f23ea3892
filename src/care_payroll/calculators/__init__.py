"""Payroll calculation."""

from care_payroll.calculators.holiday_calendar import HolidayCalendar
from care_payroll.calculators.payroll_calculator import PayrollCalculator
from care_payroll.calculators.rate_resolver import RateResolution, RateResolver

__all__ = [
    "HolidayCalendar",
    "PayrollCalculator",
    "RateResolution",
    "RateResolver",
]
