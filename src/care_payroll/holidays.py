"""Holiday reference data loading."""

from __future__ import annotations

import json
from decimal import Decimal
from importlib import resources
from pathlib import Path

from care_payroll.calculators.holiday_calendar import HolidayCalendar

BUNDLED_HOLIDAYS = "holidays.json"


def load_holiday_calendar(path: str | Path | None = None) -> HolidayCalendar:
    """Load a holiday calendar from a JSON file.

    The file holds a list of ``{"date": "YYYY-MM-DD", "name": ..., "pay_multiplier": ...}``
    objects, one per calendar date. Without a path, the bundled table is used.
    """
    if path is None:
        text = (
            resources.files("care_payroll.data")
            .joinpath(BUNDLED_HOLIDAYS)
            .read_text(encoding="utf-8")
        )
    else:
        text = Path(path).read_text(encoding="utf-8")

    records = json.loads(text, parse_float=Decimal)
    if not isinstance(records, list):
        raise ValueError("Holiday table must be a JSON list")
    return HolidayCalendar.from_records(records)
