"""Tests for rate tier resolution."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from care_payroll.calculators import RateResolver
from care_payroll.calculators.types import CaregiverRates, Holiday, HourCategory
from care_payroll.config import PayrollConfig
from care_payroll.exceptions import CalculationError

from conftest import INDEPENDENCE_DAY, REGULAR_DAY, SATURDAY

HOLIDAY = Holiday(date(2024, 7, 4), "Independence Day", Decimal("1.5"))


class TestBaseRateResolution:
    """Test base and overtime rate fallbacks."""

    def test_work_log_rate_wins(self, make_work_log):
        resolver = RateResolver()
        work_log = make_work_log(base_rate=Decimal("20"))

        rate = resolver.resolve_base_rate(work_log, CaregiverRates(Decimal("18")))

        assert rate == Decimal("20")

    def test_falls_back_to_member_rate(self, make_work_log):
        resolver = RateResolver()
        work_log = make_work_log(base_rate=None)

        assert resolver.resolve_base_rate(work_log, CaregiverRates(Decimal("18"))) == Decimal("18")

    def test_zero_rate_falls_through(self, make_work_log):
        """Test that an unset (zero) rate is treated like a missing one."""
        resolver = RateResolver()
        work_log = make_work_log(base_rate=Decimal("0"))

        assert resolver.resolve_base_rate(work_log, CaregiverRates(Decimal("0"))) == Decimal("15")

    def test_falls_back_to_configured_default(self, make_work_log):
        resolver = RateResolver(PayrollConfig(default_regular_rate=Decimal("17.50")))
        work_log = make_work_log(base_rate=None)

        assert resolver.resolve_base_rate(work_log) == Decimal("17.50")

    def test_negative_base_rate_rejected(self, make_work_log):
        resolver = RateResolver()
        work_log = make_work_log(base_rate=Decimal("-1"))

        with pytest.raises(CalculationError) as exc_info:
            resolver.resolve_base_rate(work_log)

        assert exc_info.value.work_log_id == work_log.id

    def test_overtime_rate_from_member_or_multiplier(self):
        resolver = RateResolver()

        assert resolver.resolve_overtime_rate(Decimal("20")) == Decimal("30.0")
        assert resolver.resolve_overtime_rate(
            Decimal("20"), CaregiverRates(overtime_rate=Decimal("32"))
        ) == Decimal("32")


class TestTierPrecedence:
    """Test holiday > weekend > shadow day > regular."""

    def test_regular_weekday(self, make_work_log):
        resolution = RateResolver().resolve(make_work_log(REGULAR_DAY))

        assert resolution.category == HourCategory.REGULAR
        assert resolution.effective_rate == Decimal("20")
        assert resolution.effective_multiplier == Decimal("1")
        assert resolution.is_shadow_day is False

    def test_weekend_is_overtime(self, make_work_log):
        resolution = RateResolver().resolve(make_work_log(SATURDAY, base_rate=Decimal("15")))

        assert resolution.category == HourCategory.OVERTIME
        assert resolution.overtime_rate == Decimal("22.5")
        # Reported rate stays at base outside holidays
        assert resolution.effective_rate == Decimal("15")

    def test_shadow_day_on_weekday(self, make_work_log):
        resolution = RateResolver().resolve(
            make_work_log(REGULAR_DAY, rate_multiplier=Decimal("0.5"))
        )

        assert resolution.category == HourCategory.SHADOW
        assert resolution.shadow_rate == Decimal("10.0")
        assert resolution.effective_rate == Decimal("10.0")
        assert resolution.effective_multiplier == Decimal("0.5")

    def test_shadow_day_beats_weekend(self, make_work_log):
        """Test that a weekend shadow day is paid as a shadow day."""
        resolution = RateResolver().resolve(
            make_work_log(SATURDAY, rate_multiplier=Decimal("0.5"))
        )

        assert resolution.category == HourCategory.SHADOW

    def test_holiday_beats_everything(self, make_work_log):
        resolution = RateResolver().resolve(make_work_log(INDEPENDENCE_DAY), holiday=HOLIDAY)

        assert resolution.category == HourCategory.HOLIDAY
        assert resolution.holiday_rate == Decimal("30.0")
        assert resolution.effective_multiplier == Decimal("1.5")
        assert resolution.holiday == HOLIDAY

    def test_shadow_day_on_holiday(self, make_work_log):
        resolution = RateResolver().resolve(
            make_work_log(INDEPENDENCE_DAY, rate_multiplier=Decimal("0.5")),
            holiday=HOLIDAY,
        )

        assert resolution.category == HourCategory.HOLIDAY
        assert resolution.effective_multiplier == Decimal("0.75")
        assert resolution.holiday_rate == Decimal("15.00")
        assert resolution.is_shadow_day is True

    def test_other_multipliers_do_not_change_pay(self, make_work_log):
        """Test that only the 0.5 value marks a shadow day."""
        resolution = RateResolver().resolve(
            make_work_log(REGULAR_DAY, rate_multiplier=Decimal("2"))
        )

        assert resolution.category == HourCategory.REGULAR
        assert resolution.effective_rate == Decimal("20")

    def test_negative_multiplier_rejected(self, make_work_log):
        with pytest.raises(CalculationError):
            RateResolver().resolve(make_work_log(rate_multiplier=Decimal("-0.5")))


class TestWorkDate:
    """Test calendar date resolution in the platform time zone."""

    def test_naive_timestamp_is_platform_local(self):
        resolver = RateResolver()
        assert resolver.work_date(datetime(2024, 7, 6, 23, 30)) == date(2024, 7, 6)

    def test_aware_timestamp_converted(self):
        """Test that 02:00 UTC Sunday is still Saturday in New York."""
        resolver = RateResolver(PayrollConfig(platform_timezone="America/New_York"))
        start = datetime(2024, 7, 7, 2, 0, tzinfo=timezone.utc)

        assert resolver.work_date(start) == date(2024, 7, 6)
