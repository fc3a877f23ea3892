"""Receipt composition for work logs and payroll entries."""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from uuid import UUID
from zoneinfo import ZoneInfo

from care_payroll.calculators.payroll_calculator import PayrollCalculator
from care_payroll.calculators.types import (
    ZERO,
    CaregiverRates,
    HourCategory,
    PayrollEntryRecord,
    WorkLogExpenseRecord,
    WorkLogRecord,
)
from care_payroll.config import PayrollConfig
from care_payroll.documents.types import ReceiptDocument, ReceiptTable
from care_payroll.exceptions import ReceiptError
from care_payroll.services.ports import DocumentWriter

LINE_ITEM_COLUMNS = ("Description", "Hours", "Rate", "Amount")

CATEGORY_LABELS = {
    HourCategory.REGULAR: "Regular",
    HourCategory.OVERTIME: "Overtime",
    HourCategory.HOLIDAY: "Holiday",
    HourCategory.SHADOW: "Shadow Day",
}

MULTIPLE_CAREGIVERS = "Multiple Caregivers"
UNKNOWN_CAREGIVER = "Unknown"


class ReceiptComposer:
    """Composes receipts and hands them to a document writer.

    Modes:
    - Work log receipt: one line-item row for the whole interval at its
      resolved rate, followed by an expenses table
    - Payroll entry receipt: one row per non-zero hour category, an
      expense row and a total row
    - Consolidated receipt: summary by hour category across entries, plus
      one detail row per entry

    Amounts are rounded to cents here and nowhere earlier. Apart from the
    "Generated" header line, composition is a pure function of its input.
    """

    OUTPUT_PRECISION = Decimal("0.01")

    def __init__(
        self,
        calculator: PayrollCalculator,
        writer: DocumentWriter,
        config: PayrollConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.calculator = calculator
        self.writer = writer
        self.config = config or calculator.config
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._zone = ZoneInfo(self.config.platform_timezone)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    @classmethod
    def round_to_cents(cls, amount: Decimal) -> Decimal:
        return amount.quantize(cls.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    def money(self, amount: Decimal) -> str:
        return f"{self.config.currency_symbol}{self.round_to_cents(amount):,.2f}"

    def hourly(self, rate: Decimal) -> str:
        return f"{self.money(rate)}/hr"

    @classmethod
    def hours(cls, hours: Decimal) -> str:
        return f"{hours.quantize(cls.OUTPUT_PRECISION, rounding=ROUND_HALF_UP):.2f}"

    def _local(self, value: datetime) -> datetime:
        return value.astimezone(self._zone) if value.tzinfo is not None else value

    def _timestamp(self, value: datetime) -> str:
        return self._local(value).strftime("%b %d, %Y %I:%M %p")

    def _day(self, value: datetime) -> str:
        return self._local(value).strftime("%b %d, %Y")

    def _interval(self, start: datetime, end: datetime) -> str:
        start, end = self._local(start), self._local(end)
        if start.date() == end.date():
            return f"{self._timestamp(start)} - {end.strftime('%I:%M %p')}"
        return f"{self._timestamp(start)} - {self._timestamp(end)}"

    @staticmethod
    def receipt_id(prefix: str, source_id: UUID) -> str:
        return f"{prefix}-{source_id.hex[:8].upper()}"

    @staticmethod
    def consolidated_receipt_id(entries: Iterable[PayrollEntryRecord]) -> str:
        """Order-independent id derived from the entry ids."""
        canonical = ",".join(sorted(str(entry.id) for entry in entries))
        return "PR-" + hashlib.sha256(canonical.encode()).hexdigest()[:8].upper()

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def compose_work_log_receipt(
        self,
        work_log: WorkLogRecord,
        rates: CaregiverRates | None = None,
        expenses: Sequence[WorkLogExpenseRecord] | None = None,
        generated_at: datetime | None = None,
    ) -> ReceiptDocument:
        """Receipt for a single work log at its resolved rate."""
        if expenses is None:
            expenses = work_log.expenses
        calculation = self.calculator.compute(work_log, rates, expenses)

        header = (
            ("Receipt ID", self.receipt_id("WL", work_log.id)),
            ("Work Date", self._interval(work_log.start_time, work_log.end_time)),
            ("Generated", self._timestamp(generated_at or self.clock())),
            ("Status", work_log.status.value.title()),
            ("Caregiver", work_log.caregiver_name or UNKNOWN_CAREGIVER),
        )

        tables = [
            ReceiptTable(
                title="Line Items",
                columns=LINE_ITEM_COLUMNS,
                rows=(
                    (
                        f"Care work ({calculation.rate_label} rate)",
                        self.hours(calculation.total_hours),
                        self.hourly(calculation.applied_rate),
                        self.money(calculation.hours_amount),
                    ),
                ),
            )
        ]

        if expenses:
            tables.append(
                ReceiptTable(
                    title="Expenses",
                    columns=("Category", "Description", "Status", "Amount"),
                    rows=tuple(
                        (
                            expense.category.label,
                            expense.description,
                            expense.status.value.title(),
                            self.money(expense.amount),
                        )
                        for expense in expenses
                    ),
                    footer_row=("", "Total Expenses", "", self.money(calculation.expense_total)),
                )
            )

        return ReceiptDocument(
            title="Pay Receipt",
            header_lines=header,
            tables=tuple(tables),
            summary_lines=(("Grand Total", self.money(calculation.total_amount)),),
            notes=work_log.notes or None,
            footer="This is an automatically generated receipt.",
        )

    def compose_entry_receipt(
        self, entry: PayrollEntryRecord, generated_at: datetime | None = None
    ) -> ReceiptDocument:
        """Receipt for a payroll entry, one row per non-zero hour category."""
        header = (
            ("Receipt ID", self.receipt_id("PE", entry.id)),
            ("Work Date", self._interval(entry.period_start, entry.period_end)),
            ("Generated", self._timestamp(generated_at or self.clock())),
            ("Status", entry.payment_status.value.title()),
            ("Caregiver", entry.caregiver_name or UNKNOWN_CAREGIVER),
        )

        rows = []
        for category, (hours, rate) in entry.hours_by_category().items():
            if hours > 0:
                rows.append(
                    (
                        f"{CATEGORY_LABELS[category]} hours",
                        self.hours(hours),
                        self.hourly(rate),
                        self.money(hours * rate),
                    )
                )
        if entry.expense_total > 0:
            rows.append(("Expenses", "", "", self.money(entry.expense_total)))

        table = ReceiptTable(
            title="Line Items",
            columns=LINE_ITEM_COLUMNS,
            rows=tuple(rows),
            footer_row=("Total", self.hours(entry.total_hours), "", self.money(entry.total_amount)),
        )

        summary = [("Total Amount", self.money(entry.total_amount))]
        if entry.payment_date is not None:
            summary.append(("Paid On", self._day(entry.payment_date)))

        return ReceiptDocument(
            title="Pay Receipt",
            header_lines=header,
            tables=(table,),
            summary_lines=tuple(summary),
            footer="This is an automatically generated receipt.",
        )

    def compose_consolidated_receipt(
        self,
        entries: Sequence[PayrollEntryRecord],
        generated_at: datetime | None = None,
    ) -> ReceiptDocument:
        """Summary and per-entry detail across several payroll entries.

        Raises:
            ReceiptError: If there are no entries
        """
        if not entries:
            raise ReceiptError("No payroll entries to include in the report")

        caregivers = {entry.care_team_member_id for entry in entries}
        if len(caregivers) > 1:
            caregiver = MULTIPLE_CAREGIVERS
        else:
            caregiver = entries[0].caregiver_name or UNKNOWN_CAREGIVER

        period_start = min(entry.period_start for entry in entries)
        period_end = max(entry.period_end for entry in entries)

        header = (
            ("Receipt ID", self.consolidated_receipt_id(entries)),
            ("Period", f"{self._day(period_start)} - {self._day(period_end)}"),
            ("Entries", str(len(entries))),
            ("Generated", self._timestamp(generated_at or self.clock())),
            ("Caregiver", caregiver),
        )

        category_hours = {category: ZERO for category in HourCategory}
        category_amounts = {category: ZERO for category in HourCategory}
        expense_total = ZERO
        total_hours = ZERO
        total_amount = ZERO
        for entry in entries:
            for category, (hours, rate) in entry.hours_by_category().items():
                category_hours[category] += hours
                category_amounts[category] += hours * rate
            expense_total += entry.expense_total
            total_hours += entry.total_hours
            total_amount += entry.total_amount

        summary_rows = [
            (
                CATEGORY_LABELS[category],
                self.hours(category_hours[category]),
                self.money(category_amounts[category]),
            )
            for category in HourCategory
        ]
        summary_rows.append(("Expenses", "", self.money(expense_total)))

        summary = ReceiptTable(
            title="Summary",
            columns=("Category", "Hours", "Amount"),
            rows=tuple(summary_rows),
            footer_row=("Total", self.hours(total_hours), self.money(total_amount)),
        )

        details = ReceiptTable(
            title="Details",
            columns=("Date", "Caregiver", "Hours", "Amount"),
            rows=tuple(
                (
                    self._local(entry.period_start).strftime("%m/%d/%Y"),
                    entry.caregiver_name or UNKNOWN_CAREGIVER,
                    self.hours(entry.total_hours),
                    self.money(entry.total_amount),
                )
                for entry in entries
            ),
            footer_row=("Total", "", self.hours(total_hours), self.money(total_amount)),
        )

        return ReceiptDocument(
            title="Payroll Report",
            header_lines=header,
            tables=(summary, details),
            summary_lines=(("Total Amount", self.money(total_amount)),),
            footer="This is an automatically generated payroll report.",
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_work_log(
        self,
        work_log: WorkLogRecord,
        rates: CaregiverRates | None = None,
        expenses: Sequence[WorkLogExpenseRecord] | None = None,
    ) -> Any:
        return self.writer.write(self.compose_work_log_receipt(work_log, rates, expenses))

    def render_entry(self, entry: PayrollEntryRecord) -> Any:
        return self.writer.write(self.compose_entry_receipt(entry))

    def render_consolidated(self, entries: Sequence[PayrollEntryRecord]) -> Any:
        return self.writer.write(self.compose_consolidated_receipt(entries))
