"""Tests for holiday calendar lookup and loading."""

import json
from datetime import date, datetime
from decimal import Decimal

import pytest

from care_payroll.calculators import HolidayCalendar
from care_payroll.calculators.types import Holiday
from care_payroll.holidays import load_holiday_calendar


class TestHolidayCalendar:
    """Test holiday lookup by calendar day."""

    def test_lookup_by_date_and_datetime(self, holiday_calendar):
        """Test that lookup matches on the calendar day only."""
        holiday = holiday_calendar.lookup(date(2024, 7, 4))
        assert holiday is not None
        assert holiday.name == "Independence Day"
        assert holiday.pay_multiplier == Decimal("1.5")

        assert holiday_calendar.lookup(datetime(2024, 7, 4, 23, 59)) == holiday
        assert holiday_calendar.lookup(date(2024, 7, 5)) is None

    def test_is_holiday(self, holiday_calendar):
        assert holiday_calendar.is_holiday(date(2024, 12, 25)) is True
        assert holiday_calendar.is_holiday(date(2024, 12, 24)) is False

    def test_iterates_in_date_order(self):
        """Test iteration order is by date regardless of input order."""
        calendar = HolidayCalendar(
            [
                Holiday(date(2024, 12, 25), "Christmas Day", Decimal("2.0")),
                Holiday(date(2024, 1, 1), "New Year's Day", Decimal("1.5")),
            ]
        )
        assert [h.date for h in calendar] == [date(2024, 1, 1), date(2024, 12, 25)]
        assert len(calendar) == 2

    def test_rejects_multiplier_below_one(self):
        with pytest.raises(ValueError):
            HolidayCalendar([Holiday(date(2024, 1, 1), "Discount Day", Decimal("0.9"))])

    def test_rejects_duplicate_dates(self):
        with pytest.raises(ValueError):
            HolidayCalendar(
                [
                    Holiday(date(2024, 1, 1), "New Year's Day", Decimal("1.5")),
                    Holiday(date(2024, 1, 1), "Also New Year's Day", Decimal("2.0")),
                ]
            )

    def test_from_records_accepts_camel_case_multiplier(self):
        calendar = HolidayCalendar.from_records(
            [{"date": "2025-07-04", "name": "Independence Day", "payMultiplier": 1.5}]
        )
        assert calendar.lookup(date(2025, 7, 4)).pay_multiplier == Decimal("1.5")

    def test_from_records_rejects_bad_multiplier(self):
        with pytest.raises(ValueError):
            HolidayCalendar.from_records(
                [{"date": "2025-07-04", "name": "Independence Day", "pay_multiplier": "lots"}]
            )


class TestLoadHolidayCalendar:
    """Test loading holiday tables from JSON."""

    def test_bundled_table(self):
        """Test the bundled table covers the usual US holidays."""
        calendar = load_holiday_calendar()
        assert calendar.lookup(date(2024, 7, 4)).name == "Independence Day"
        assert calendar.lookup(date(2025, 12, 25)).pay_multiplier == Decimal("2.0")
        assert all(h.pay_multiplier >= 1 for h in calendar)

    def test_table_from_file(self, tmp_path):
        path = tmp_path / "holidays.json"
        path.write_text(
            json.dumps([{"date": "2030-02-14", "name": "Company Day", "pay_multiplier": 1.25}])
        )

        calendar = load_holiday_calendar(path)

        assert len(calendar) == 1
        assert calendar.lookup(date(2030, 2, 14)).pay_multiplier == Decimal("1.25")

    def test_table_must_be_a_list(self, tmp_path):
        path = tmp_path / "holidays.json"
        path.write_text(json.dumps({"date": "2030-02-14"}))

        with pytest.raises(ValueError):
            load_holiday_calendar(path)
