"""Payroll calculation for a single work log."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from care_payroll.calculators.holiday_calendar import HolidayCalendar
from care_payroll.calculators.rate_resolver import RateResolver
from care_payroll.calculators.types import (
    ZERO,
    CaregiverRates,
    HourCategory,
    PaymentStatus,
    PayrollCalculation,
    PayrollEntryRecord,
    WorkLogExpenseRecord,
    WorkLogRecord,
)
from care_payroll.config import PayrollConfig
from care_payroll.exceptions import CalculationError

SECONDS_PER_HOUR = Decimal("3600")


class PayrollCalculator:
    """Turns one work log into hours by category and a total amount.

    Calculation pipeline:
    1) Elapsed hours between start and end (no break deduction)
    2) Holiday lookup on the work date
    3) Rate tier resolution (holiday, weekend, shadow day, regular)
    4) All hours assigned to the single resolved tier
    5) Expense total, summed regardless of each expense's review status

    The calculator is pure: it performs no I/O and never rounds.
    """

    def __init__(
        self,
        holiday_calendar: HolidayCalendar,
        config: PayrollConfig | None = None,
    ):
        self.holiday_calendar = holiday_calendar
        self.config = config or PayrollConfig()
        self.rate_resolver = RateResolver(self.config)

    @staticmethod
    def elapsed_hours(start_time: datetime, end_time: datetime) -> Decimal:
        """Wall-clock hours between two timestamps, floored at zero."""
        seconds = Decimal(str((end_time - start_time).total_seconds()))
        return max(seconds / SECONDS_PER_HOUR, ZERO)

    @staticmethod
    def expense_total(expenses: Iterable[WorkLogExpenseRecord] | None) -> Decimal:
        return sum((expense.amount for expense in expenses or ()), ZERO)

    def validate(self, work_log: WorkLogRecord) -> None:
        """Raise CalculationError if the work log cannot be priced."""
        if work_log.start_time is None or work_log.end_time is None:
            raise CalculationError("start and end time are required", work_log.id)
        if (work_log.start_time.tzinfo is None) != (work_log.end_time.tzinfo is None):
            raise CalculationError(
                "start and end time must both be timezone-aware or both naive",
                work_log.id,
            )
        if work_log.end_time <= work_log.start_time:
            raise CalculationError("end time must be after start time", work_log.id)

    def compute(
        self,
        work_log: WorkLogRecord,
        rates: CaregiverRates | None = None,
        expenses: Iterable[WorkLogExpenseRecord] | None = None,
    ) -> PayrollCalculation:
        """Calculate pay for a work log.

        Args:
            work_log: The work log to price
            rates: Standing rates of the care team member
            expenses: Expenses to add; defaults to the ones attached to the log

        Returns:
            The categorized calculation

        Raises:
            CalculationError: If the interval or rates are malformed
        """
        self.validate(work_log)

        total_hours = self.elapsed_hours(work_log.start_time, work_log.end_time)
        work_date = self.rate_resolver.work_date(work_log.start_time)
        holiday = self.holiday_calendar.lookup(work_date)
        resolution = self.rate_resolver.resolve(work_log, rates, holiday)

        hours = {category: ZERO for category in HourCategory}
        hours[resolution.category] = total_hours

        if expenses is None:
            expenses = work_log.expenses

        return PayrollCalculation(
            category=resolution.category,
            total_hours=total_hours,
            regular_hours=hours[HourCategory.REGULAR],
            overtime_hours=hours[HourCategory.OVERTIME],
            holiday_hours=hours[HourCategory.HOLIDAY],
            shadow_hours=hours[HourCategory.SHADOW],
            regular_rate=resolution.base_rate,
            overtime_rate=resolution.overtime_rate,
            holiday_rate=resolution.holiday_rate,
            shadow_rate=resolution.shadow_rate,
            effective_rate=resolution.effective_rate,
            effective_multiplier=resolution.effective_multiplier,
            expense_total=self.expense_total(expenses),
            work_date=work_date,
            holiday=resolution.holiday,
            is_shadow_day=resolution.is_shadow_day,
        )

    @staticmethod
    def build_payroll_entry(
        work_log: WorkLogRecord, calculation: PayrollCalculation
    ) -> PayrollEntryRecord:
        """Build the (unsaved) payroll entry for an approved work log."""
        return PayrollEntryRecord(
            id=uuid4(),
            work_log_id=work_log.id,
            care_team_member_id=work_log.care_team_member_id,
            care_plan_id=work_log.care_plan_id,
            period_start=work_log.start_time,
            period_end=work_log.end_time,
            regular_hours=calculation.regular_hours,
            overtime_hours=calculation.overtime_hours,
            holiday_hours=calculation.holiday_hours,
            shadow_hours=calculation.shadow_hours,
            regular_rate=calculation.regular_rate,
            overtime_rate=calculation.overtime_rate,
            holiday_rate=calculation.holiday_rate,
            shadow_rate=calculation.shadow_rate,
            expense_total=calculation.expense_total,
            total_amount=calculation.total_amount,
            payment_status=PaymentStatus.PENDING,
            caregiver_name=work_log.caregiver_name,
        )
