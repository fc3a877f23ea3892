"""PayrollStore implementation over a SQLAlchemy AsyncSession."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from care_payroll.calculators.types import (
    ZERO,
    CaregiverRates,
    ExpenseCategory,
    ExpenseStatus,
    PaymentStatus,
    PayrollEntryRecord,
    WorkLogExpenseRecord,
    WorkLogRecord,
    WorkLogStatus,
)
from care_payroll.exceptions import PersistenceFailure
from care_payroll.models import CareTeamMember, PayrollEntry, WorkLog, WorkLogExpense


def _decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _amount(value: Any) -> Decimal:
    return _decimal(value) if value is not None else ZERO


class SqlAlchemyPayrollStore:
    """Persistence port backed by the ORM models.

    The store never commits; the caller owns the transaction. A failed
    write rolls the session back before PersistenceFailure is raised, so
    everything written earlier in the same unit of work is discarded too.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # ------------------------------------------------------------------
    # Work logs
    # ------------------------------------------------------------------

    async def get_work_log(
        self, work_log_id: UUID, *, with_expenses: bool = True
    ) -> WorkLogRecord | None:
        try:
            result = await self.session.execute(
                select(WorkLog, CareTeamMember.display_name)
                .outerjoin(CareTeamMember, WorkLog.care_team_member_id == CareTeamMember.id)
                .where(WorkLog.id == work_log_id)
                .execution_options(populate_existing=True)
            )
            row = result.first()
            if row is None:
                return None
            work_log, display_name = row
            expenses = await self._select_expenses(work_log_id) if with_expenses else []
        except SQLAlchemyError as exc:
            raise PersistenceFailure("get_work_log", exc) from exc
        return self._work_log_record(work_log, display_name, expenses)

    async def create_work_log(self, work_log: WorkLogRecord) -> WorkLogRecord:
        row = WorkLog(
            id=work_log.id,
            care_team_member_id=work_log.care_team_member_id,
            care_plan_id=work_log.care_plan_id,
            shift_id=work_log.shift_id,
            start_time=work_log.start_time,
            end_time=work_log.end_time,
            base_rate=work_log.base_rate,
            rate_multiplier=work_log.rate_multiplier,
            status=WorkLogStatus(work_log.status).value,
            notes=work_log.notes,
            status_note=work_log.status_note,
        )
        await self._insert(row, "create_work_log")
        created = await self.get_work_log(work_log.id)
        if created is None:
            raise PersistenceFailure("create_work_log")
        return created

    async def update_work_log_status(
        self,
        work_log_id: UUID,
        status: WorkLogStatus,
        note: str | None = None,
        *,
        expected_status: WorkLogStatus | None = None,
    ) -> bool:
        stmt = update(WorkLog).where(WorkLog.id == work_log_id)
        if expected_status is not None:
            stmt = stmt.where(WorkLog.status == WorkLogStatus(expected_status).value)
        values: dict[str, Any] = {"status": WorkLogStatus(status).value}
        if note is not None:
            values["status_note"] = note
        return await self._conditional_update(
            stmt.values(**values), "update_work_log_status"
        )

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    async def add_expense(self, expense: WorkLogExpenseRecord) -> WorkLogExpenseRecord:
        row = WorkLogExpense(
            id=expense.id,
            work_log_id=expense.work_log_id,
            category=ExpenseCategory(expense.category).value,
            amount=expense.amount,
            description=expense.description or "",
            receipt_url=expense.receipt_url,
            status=ExpenseStatus(expense.status).value,
        )
        await self._insert(row, "add_expense")
        created = await self.get_expense(expense.id)
        if created is None:
            raise PersistenceFailure("add_expense")
        return created

    async def get_expense(self, expense_id: UUID) -> WorkLogExpenseRecord | None:
        try:
            row = await self.session.scalar(
                select(WorkLogExpense)
                .where(WorkLogExpense.id == expense_id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as exc:
            raise PersistenceFailure("get_expense", exc) from exc
        return self._expense_record(row) if row is not None else None

    async def update_expense_status(
        self,
        expense_id: UUID,
        status: ExpenseStatus,
        *,
        expected_status: ExpenseStatus | None = None,
    ) -> bool:
        stmt = update(WorkLogExpense).where(WorkLogExpense.id == expense_id)
        if expected_status is not None:
            stmt = stmt.where(WorkLogExpense.status == ExpenseStatus(expected_status).value)
        return await self._conditional_update(
            stmt.values(status=ExpenseStatus(status).value), "update_expense_status"
        )

    async def list_expenses(self, work_log_id: UUID) -> list[WorkLogExpenseRecord]:
        try:
            return await self._select_expenses(work_log_id)
        except SQLAlchemyError as exc:
            raise PersistenceFailure("list_expenses", exc) from exc

    # ------------------------------------------------------------------
    # Care team
    # ------------------------------------------------------------------

    async def get_caregiver_rates(self, care_team_member_id: UUID) -> CaregiverRates:
        """Standing rates of a member; unset when the member is unknown."""
        try:
            result = await self.session.execute(
                select(CareTeamMember.regular_rate, CareTeamMember.overtime_rate).where(
                    CareTeamMember.id == care_team_member_id
                )
            )
            row = result.first()
        except SQLAlchemyError as exc:
            raise PersistenceFailure("get_caregiver_rates", exc) from exc
        if row is None:
            return CaregiverRates()
        return CaregiverRates(
            regular_rate=_decimal(row.regular_rate),
            overtime_rate=_decimal(row.overtime_rate),
        )

    # ------------------------------------------------------------------
    # Payroll entries
    # ------------------------------------------------------------------

    async def create_payroll_entry(self, entry: PayrollEntryRecord) -> PayrollEntryRecord:
        row = PayrollEntry(
            id=entry.id,
            work_log_id=entry.work_log_id,
            care_team_member_id=entry.care_team_member_id,
            care_plan_id=entry.care_plan_id,
            period_start=entry.period_start,
            period_end=entry.period_end,
            regular_hours=entry.regular_hours,
            overtime_hours=entry.overtime_hours,
            holiday_hours=entry.holiday_hours,
            shadow_hours=entry.shadow_hours,
            regular_rate=entry.regular_rate,
            overtime_rate=entry.overtime_rate,
            holiday_rate=entry.holiday_rate,
            shadow_rate=entry.shadow_rate,
            expense_total=entry.expense_total,
            total_amount=entry.total_amount,
            payment_status=PaymentStatus(entry.payment_status).value,
            payment_date=entry.payment_date,
        )
        await self._insert(row, "create_payroll_entry")
        created = await self.get_payroll_entry(entry.id)
        if created is None:
            raise PersistenceFailure("create_payroll_entry")
        return created

    async def get_payroll_entry(self, entry_id: UUID) -> PayrollEntryRecord | None:
        return await self._select_one_entry(PayrollEntry.id == entry_id, "get_payroll_entry")

    async def get_payroll_entry_for_work_log(
        self, work_log_id: UUID
    ) -> PayrollEntryRecord | None:
        return await self._select_one_entry(
            PayrollEntry.work_log_id == work_log_id, "get_payroll_entry_for_work_log"
        )

    async def update_payroll_payment_status(
        self,
        entry_id: UUID,
        status: PaymentStatus,
        payment_date: datetime | None,
        *,
        expected_statuses: tuple[PaymentStatus, ...] | None = None,
    ) -> bool:
        stmt = update(PayrollEntry).where(PayrollEntry.id == entry_id)
        if expected_statuses is not None:
            stmt = stmt.where(
                PayrollEntry.payment_status.in_(
                    [PaymentStatus(s).value for s in expected_statuses]
                )
            )
        values: dict[str, Any] = {"payment_status": PaymentStatus(status).value}
        if payment_date is not None:
            values["payment_date"] = payment_date
        return await self._conditional_update(
            stmt.values(**values), "update_payroll_payment_status"
        )

    async def list_payroll_entries(self, care_plan_id: UUID) -> list[PayrollEntryRecord]:
        """Entries of a care plan, most recent work first."""
        try:
            result = await self.session.execute(
                self._entry_query()
                .where(PayrollEntry.care_plan_id == care_plan_id)
                .order_by(PayrollEntry.period_start.desc(), PayrollEntry.id)
            )
            rows = result.all()
        except SQLAlchemyError as exc:
            raise PersistenceFailure("list_payroll_entries", exc) from exc
        return [self._entry_record(entry, name) for entry, name in rows]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _insert(self, row: Any, operation: str) -> None:
        self.session.add(row)
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistenceFailure(operation, exc) from exc

    async def _conditional_update(self, stmt: Any, operation: str) -> bool:
        try:
            result = await self.session.execute(
                stmt.execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistenceFailure(operation, exc) from exc
        return (result.rowcount or 0) > 0

    async def _select_expenses(self, work_log_id: UUID) -> list[WorkLogExpenseRecord]:
        result = await self.session.scalars(
            select(WorkLogExpense)
            .where(WorkLogExpense.work_log_id == work_log_id)
            .order_by(WorkLogExpense.created_at, WorkLogExpense.id)
            .execution_options(populate_existing=True)
        )
        return [self._expense_record(row) for row in result.all()]

    @staticmethod
    def _entry_query():
        return (
            select(PayrollEntry, CareTeamMember.display_name)
            .outerjoin(CareTeamMember, PayrollEntry.care_team_member_id == CareTeamMember.id)
            .execution_options(populate_existing=True)
        )

    async def _select_one_entry(self, criterion: Any, operation: str) -> PayrollEntryRecord | None:
        try:
            result = await self.session.execute(self._entry_query().where(criterion))
            row = result.first()
        except SQLAlchemyError as exc:
            raise PersistenceFailure(operation, exc) from exc
        if row is None:
            return None
        entry, display_name = row
        return self._entry_record(entry, display_name)

    @staticmethod
    def _expense_record(row: WorkLogExpense) -> WorkLogExpenseRecord:
        return WorkLogExpenseRecord(
            id=row.id,
            work_log_id=row.work_log_id,
            category=ExpenseCategory(row.category),
            amount=_amount(row.amount),
            description=row.description or "",
            status=ExpenseStatus(row.status),
            receipt_url=row.receipt_url,
            created_at=row.created_at,
        )

    @staticmethod
    def _work_log_record(
        row: WorkLog,
        display_name: str | None,
        expenses: list[WorkLogExpenseRecord],
    ) -> WorkLogRecord:
        return WorkLogRecord(
            id=row.id,
            care_team_member_id=row.care_team_member_id,
            care_plan_id=row.care_plan_id,
            start_time=row.start_time,
            end_time=row.end_time,
            status=WorkLogStatus(row.status),
            base_rate=_decimal(row.base_rate),
            rate_multiplier=_decimal(row.rate_multiplier),
            shift_id=row.shift_id,
            notes=row.notes,
            status_note=row.status_note,
            caregiver_name=display_name,
            expenses=expenses,
            created_at=row.created_at,
        )

    @staticmethod
    def _entry_record(row: PayrollEntry, display_name: str | None) -> PayrollEntryRecord:
        return PayrollEntryRecord(
            id=row.id,
            work_log_id=row.work_log_id,
            care_team_member_id=row.care_team_member_id,
            care_plan_id=row.care_plan_id,
            period_start=row.period_start,
            period_end=row.period_end,
            regular_hours=_amount(row.regular_hours),
            overtime_hours=_amount(row.overtime_hours),
            holiday_hours=_amount(row.holiday_hours),
            shadow_hours=_amount(row.shadow_hours),
            regular_rate=_amount(row.regular_rate),
            overtime_rate=_amount(row.overtime_rate),
            holiday_rate=_amount(row.holiday_rate),
            shadow_rate=_amount(row.shadow_rate),
            expense_total=_amount(row.expense_total),
            total_amount=_amount(row.total_amount),
            payment_status=PaymentStatus(row.payment_status),
            payment_date=row.payment_date,
            caregiver_name=display_name,
            created_at=row.created_at,
        )
