"""Static holiday lookup by calendar date."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from care_payroll.calculators.types import Holiday


class HolidayCalendar:
    """Read-only mapping of calendar dates to holidays.

    Built once from reference data and shared freely; nothing mutates it
    after construction. Matching is by calendar day only.
    """

    def __init__(self, holidays: Iterable[Holiday] = ()):
        by_date: dict[date, Holiday] = {}
        for holiday in holidays:
            if holiday.pay_multiplier < 1:
                raise ValueError(
                    f"Holiday {holiday.name} on {holiday.date} has pay multiplier "
                    f"{holiday.pay_multiplier}; must be >= 1.0"
                )
            if holiday.date in by_date:
                raise ValueError(f"Duplicate holiday entry for {holiday.date}")
            by_date[holiday.date] = holiday
        self._by_date = by_date

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> HolidayCalendar:
        """Build a calendar from ``{date, name, pay_multiplier}`` mappings.

        ``date`` is an ISO date string; ``payMultiplier`` is accepted as an
        alias of ``pay_multiplier``.
        """
        holidays = []
        for record in records:
            raw_multiplier = record.get("pay_multiplier", record.get("payMultiplier"))
            try:
                multiplier = Decimal(str(raw_multiplier))
            except (InvalidOperation, ValueError) as exc:
                raise ValueError(
                    f"Invalid pay multiplier {raw_multiplier!r} for {record.get('date')}"
                ) from exc
            holidays.append(
                Holiday(
                    date=date.fromisoformat(str(record["date"])),
                    name=str(record["name"]),
                    pay_multiplier=multiplier,
                )
            )
        return cls(holidays)

    def lookup(self, day: date | datetime) -> Holiday | None:
        """Return the holiday on this calendar day, if any."""
        if isinstance(day, datetime):
            day = day.date()
        return self._by_date.get(day)

    def is_holiday(self, day: date | datetime) -> bool:
        return self.lookup(day) is not None

    def __len__(self) -> int:
        return len(self._by_date)

    def __iter__(self):
        return iter(sorted(self._by_date.values(), key=lambda h: h.date))
