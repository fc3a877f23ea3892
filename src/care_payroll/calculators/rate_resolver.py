"""Rate tier resolution for a single work log."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from care_payroll.calculators.types import (
    ZERO,
    CaregiverRates,
    Holiday,
    HourCategory,
    WorkLogRecord,
)
from care_payroll.config import PayrollConfig
from care_payroll.exceptions import CalculationError

ONE = Decimal("1")


@dataclass(frozen=True)
class RateResolution:
    """Which tier applies to a work log, and at what rates."""

    category: HourCategory
    base_rate: Decimal
    overtime_rate: Decimal
    holiday_rate: Decimal
    shadow_rate: Decimal
    effective_rate: Decimal
    effective_multiplier: Decimal
    is_shadow_day: bool
    holiday: Holiday | None = None


class RateResolver:
    """Resolves the rate tier for a work log.

    Tier precedence (first match takes all hours):
    1. Holiday - base rate x holiday multiplier, or x 0.75 on a shadow day
    2. Weekend, not a shadow day - overtime rate
    3. Shadow day - base rate x 0.5
    4. Regular - base rate

    Base rate comes from the work log, then the care team member's standing
    regular rate, then the configured default. Overtime rate is the member's
    standing overtime rate or base rate x the default overtime multiplier.
    """

    def __init__(self, config: PayrollConfig | None = None):
        self.config = config or PayrollConfig()
        self._zone = ZoneInfo(self.config.platform_timezone)

    def work_date(self, start_time: datetime) -> date:
        """Calendar date of a work interval in the platform time zone."""
        if start_time.tzinfo is not None:
            start_time = start_time.astimezone(self._zone)
        return start_time.date()

    def is_shadow_day(self, rate_multiplier: Decimal | None) -> bool:
        return rate_multiplier is not None and rate_multiplier == self.config.shadow_day_multiplier

    def resolve_base_rate(
        self, work_log: WorkLogRecord, rates: CaregiverRates | None = None
    ) -> Decimal:
        """Resolve the hourly base rate for a work log."""
        if work_log.base_rate is not None and work_log.base_rate < 0:
            raise CalculationError("base rate cannot be negative", work_log.id)

        if work_log.base_rate:
            return work_log.base_rate
        if rates is not None and rates.regular_rate:
            return rates.regular_rate
        return self.config.default_regular_rate

    def resolve_overtime_rate(
        self, base_rate: Decimal, rates: CaregiverRates | None = None
    ) -> Decimal:
        if rates is not None and rates.overtime_rate:
            return rates.overtime_rate
        return base_rate * self.config.default_overtime_multiplier

    def resolve(
        self,
        work_log: WorkLogRecord,
        rates: CaregiverRates | None = None,
        holiday: Holiday | None = None,
    ) -> RateResolution:
        """Resolve the tier and rates for a work log.

        Args:
            work_log: The work log being priced
            rates: Standing rates of the care team member, if known
            holiday: Holiday on the work date, if any

        Returns:
            The resolved tier with every rate filled in

        Raises:
            CalculationError: If the base rate or multiplier is negative
        """
        if work_log.rate_multiplier is not None and work_log.rate_multiplier < 0:
            raise CalculationError("rate multiplier cannot be negative", work_log.id)

        base_rate = self.resolve_base_rate(work_log, rates)
        overtime_rate = self.resolve_overtime_rate(base_rate, rates)
        shadow = self.is_shadow_day(work_log.rate_multiplier)
        shadow_rate = base_rate * self.config.shadow_day_multiplier if shadow else ZERO

        if holiday is not None:
            if shadow:
                multiplier = self.config.shadow_holiday_multiplier
            else:
                multiplier = holiday.pay_multiplier
            holiday_rate = base_rate * multiplier
            return RateResolution(
                category=HourCategory.HOLIDAY,
                base_rate=base_rate,
                overtime_rate=overtime_rate,
                holiday_rate=holiday_rate,
                shadow_rate=ZERO,
                effective_rate=holiday_rate,
                effective_multiplier=multiplier,
                is_shadow_day=shadow,
                holiday=holiday,
            )

        weekend = self.work_date(work_log.start_time).weekday() >= 5
        if weekend and not shadow:
            category = HourCategory.OVERTIME
        elif shadow:
            category = HourCategory.SHADOW
        else:
            category = HourCategory.REGULAR

        return RateResolution(
            category=category,
            base_rate=base_rate,
            overtime_rate=overtime_rate,
            holiday_rate=ZERO,
            shadow_rate=shadow_rate,
            # Reported rate stays at base outside holidays and shadow days.
            effective_rate=shadow_rate if shadow else base_rate,
            effective_multiplier=self.config.shadow_day_multiplier if shadow else ONE,
            is_shadow_day=shadow,
        )
