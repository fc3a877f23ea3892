"""Listing and filtering payroll entries for a care plan."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from uuid import UUID

from care_payroll.calculators.rate_resolver import RateResolver
from care_payroll.calculators.types import PayrollEntryRecord
from care_payroll.config import PayrollConfig
from care_payroll.services.ports import PayrollStore


def filter_payroll_entries(
    entries: Iterable[PayrollEntryRecord],
    caregiver_name: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    *,
    config: PayrollConfig | None = None,
) -> list[PayrollEntryRecord]:
    """Filter entries by caregiver name and work date range.

    The name match is a case-insensitive substring. The date range is
    inclusive on both ends and compares each entry's work date, the date
    its interval starts on in the platform time zone (the same date that
    decides holiday and weekend pay).
    """
    needle = caregiver_name.lower() if caregiver_name else None
    resolver = RateResolver(config)

    result = []
    for entry in entries:
        if needle and needle not in (entry.caregiver_name or "").lower():
            continue
        work_date = resolver.work_date(entry.period_start)
        if date_from is not None and work_date < date_from:
            continue
        if date_to is not None and work_date > date_to:
            continue
        result.append(entry)
    return result


class PayrollQueryService:
    """Read-side access to a care plan's payroll entries."""

    def __init__(self, store: PayrollStore, config: PayrollConfig | None = None):
        self.store = store
        self.config = config

    async def list_entries(
        self,
        care_plan_id: UUID,
        caregiver_name: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[PayrollEntryRecord]:
        entries = await self.store.list_payroll_entries(care_plan_id)
        return filter_payroll_entries(
            entries, caregiver_name, date_from, date_to, config=self.config
        )
