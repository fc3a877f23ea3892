"""Ports the engine consumes: persistence and document writing."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from care_payroll.calculators.types import (
    CaregiverRates,
    ExpenseStatus,
    PaymentStatus,
    PayrollEntryRecord,
    WorkLogExpenseRecord,
    WorkLogRecord,
    WorkLogStatus,
)
from care_payroll.documents.types import ReceiptDocument


class PayrollStore(Protocol):
    """Persistence port for work logs and payroll entries.

    Records cross this boundary as plain values with Decimal amounts.
    Implementations raise PersistenceFailure for storage errors.

    Status updates are conditional check-and-set operations: when an
    expected status is given, the update applies only if the stored status
    still matches, and the return value reports whether it did.
    """

    async def get_work_log(
        self, work_log_id: UUID, *, with_expenses: bool = True
    ) -> WorkLogRecord | None:
        """Load a work log; its expenses are left empty when ``with_expenses`` is false."""
        ...

    async def create_work_log(self, work_log: WorkLogRecord) -> WorkLogRecord:
        ...

    async def update_work_log_status(
        self,
        work_log_id: UUID,
        status: WorkLogStatus,
        note: str | None = None,
        *,
        expected_status: WorkLogStatus | None = None,
    ) -> bool:
        ...

    async def add_expense(self, expense: WorkLogExpenseRecord) -> WorkLogExpenseRecord:
        ...

    async def get_expense(self, expense_id: UUID) -> WorkLogExpenseRecord | None:
        ...

    async def update_expense_status(
        self,
        expense_id: UUID,
        status: ExpenseStatus,
        *,
        expected_status: ExpenseStatus | None = None,
    ) -> bool:
        ...

    async def list_expenses(self, work_log_id: UUID) -> list[WorkLogExpenseRecord]:
        ...

    async def get_caregiver_rates(self, care_team_member_id: UUID) -> CaregiverRates:
        ...

    async def create_payroll_entry(self, entry: PayrollEntryRecord) -> PayrollEntryRecord:
        ...

    async def get_payroll_entry(self, entry_id: UUID) -> PayrollEntryRecord | None:
        ...

    async def get_payroll_entry_for_work_log(
        self, work_log_id: UUID
    ) -> PayrollEntryRecord | None:
        ...

    async def update_payroll_payment_status(
        self,
        entry_id: UUID,
        status: PaymentStatus,
        payment_date: datetime | None,
        *,
        expected_statuses: tuple[PaymentStatus, ...] | None = None,
    ) -> bool:
        ...

    async def list_payroll_entries(self, care_plan_id: UUID) -> list[PayrollEntryRecord]:
        ...


class DocumentWriter(Protocol):
    """Lays out a receipt document; the result is opaque to the engine."""

    media_type: str
    extension: str

    def write(self, document: ReceiptDocument) -> Any:
        ...
