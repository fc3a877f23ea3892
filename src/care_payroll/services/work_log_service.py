"""Work log lifecycle: creation, expenses, approval and rejection."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from care_payroll.calculators.payroll_calculator import PayrollCalculator
from care_payroll.calculators.types import (
    ExpenseCategory,
    ExpenseStatus,
    PayrollEntryRecord,
    ShiftRecord,
    WorkLogExpenseRecord,
    WorkLogRecord,
    WorkLogStatus,
)
from care_payroll.exceptions import (
    CalculationError,
    InvalidStateError,
    NotFoundError,
    PersistenceFailure,
)
from care_payroll.services.ports import PayrollStore
from care_payroll.services.state_machine import ExpenseStateMachine, WorkLogStateMachine

logger = logging.getLogger(__name__)


class WorkLogLifecycle:
    """Governs work logs from creation to an approved payroll entry.

    Approval is a compound operation:
    1. Load the log and check it is pending
    2. Calculate pay (fails before any write on bad data)
    3. Conditionally flip pending → approved (loser of a race gets
       InvalidStateError)
    4. Create the payroll entry; on failure revert the log to pending and
       re-raise

    so an approved log never exists without its payroll entry.
    """

    def __init__(self, store: PayrollStore, calculator: PayrollCalculator):
        self.store = store
        self.calculator = calculator

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_work_log(
        self,
        care_team_member_id: UUID,
        care_plan_id: UUID,
        start_time: datetime,
        end_time: datetime,
        base_rate: Decimal | None = None,
        rate_multiplier: Decimal | None = None,
        notes: str | None = None,
        shift_id: UUID | None = None,
    ) -> WorkLogRecord:
        """Record a new pending work log."""
        work_log = WorkLogRecord(
            id=uuid4(),
            care_team_member_id=care_team_member_id,
            care_plan_id=care_plan_id,
            start_time=start_time,
            end_time=end_time,
            status=WorkLogStatus.PENDING,
            base_rate=base_rate,
            rate_multiplier=rate_multiplier,
            shift_id=shift_id,
            notes=notes,
        )
        self.calculator.validate(work_log)
        if rate_multiplier is not None and rate_multiplier < 0:
            raise CalculationError("rate multiplier cannot be negative", work_log.id)
        if base_rate is not None and base_rate < 0:
            raise CalculationError("base rate cannot be negative", work_log.id)

        created = await self.store.create_work_log(work_log)
        logger.info(
            "Created work log %s for care team member %s", created.id, care_team_member_id
        )
        return created

    async def create_from_shift(
        self, shift: ShiftRecord, notes: str | None = None
    ) -> WorkLogRecord:
        """Record a pending work log covering a scheduled shift."""
        return await self.create_work_log(
            care_team_member_id=shift.care_team_member_id,
            care_plan_id=shift.care_plan_id,
            start_time=shift.start_time,
            end_time=shift.end_time,
            base_rate=shift.base_rate,
            rate_multiplier=shift.rate_multiplier,
            notes=notes,
            shift_id=shift.id,
        )

    async def get_work_log(
        self, work_log_id: UUID, *, with_expenses: bool = True
    ) -> WorkLogRecord:
        work_log = await self.store.get_work_log(work_log_id, with_expenses=with_expenses)
        if work_log is None:
            raise NotFoundError("WorkLog", work_log_id)
        return work_log

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    async def add_expense(
        self,
        work_log_id: UUID,
        category: ExpenseCategory | str,
        amount: Decimal,
        description: str = "",
        receipt_url: str | None = None,
    ) -> WorkLogExpenseRecord:
        """Attach an expense to a pending work log."""
        work_log = await self.get_work_log(work_log_id)
        if not WorkLogStateMachine.can_add_expenses(work_log.status):
            raise InvalidStateError(
                "WorkLog",
                work_log_id,
                work_log.status.value,
                WorkLogStatus.PENDING.value,
                reason="expenses can only be added to pending work logs",
            )
        try:
            category = ExpenseCategory(category)
        except ValueError as exc:
            raise CalculationError(
                f"unknown expense category {category!r}", work_log_id
            ) from exc
        if amount <= 0:
            raise CalculationError("expense amount must be positive", work_log_id)

        expense = WorkLogExpenseRecord(
            id=uuid4(),
            work_log_id=work_log_id,
            category=category,
            amount=amount,
            description=description,
            status=ExpenseStatus.PENDING,
            receipt_url=receipt_url,
        )
        return await self.store.add_expense(expense)

    async def review_expense(self, expense_id: UUID, approved: bool) -> WorkLogExpenseRecord:
        """Approve or reject a pending expense."""
        expense = await self.store.get_expense(expense_id)
        if expense is None:
            raise NotFoundError("WorkLogExpense", expense_id)

        target = ExpenseStatus.APPROVED if approved else ExpenseStatus.REJECTED
        ExpenseStateMachine.validate_transition(expense_id, expense.status, target)

        updated = await self.store.update_expense_status(
            expense_id, target, expected_status=ExpenseStatus.PENDING
        )
        if not updated:
            raise InvalidStateError(
                "WorkLogExpense", expense_id, None, target.value,
                reason="expense was reviewed concurrently",
            )
        expense.status = target
        return expense

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    async def approve(self, work_log_id: UUID) -> PayrollEntryRecord:
        """Approve a pending work log and create its payroll entry.

        Raises:
            NotFoundError: If the work log does not exist
            InvalidStateError: If the log is not pending, including when a
                concurrent approval won the race
            CalculationError: If the log data cannot be priced
            PersistenceFailure: If the payroll entry could not be stored;
                the log is back in pending when this propagates
        """
        work_log = await self.get_work_log(work_log_id, with_expenses=False)
        WorkLogStateMachine.validate_transition(
            work_log_id, work_log.status, WorkLogStatus.APPROVED
        )

        rates = await self.store.get_caregiver_rates(work_log.care_team_member_id)
        expenses = await self._load_expenses(work_log_id)
        calculation = self.calculator.compute(work_log, rates, expenses)
        entry = self.calculator.build_payroll_entry(work_log, calculation)

        transitioned = await self.store.update_work_log_status(
            work_log_id,
            WorkLogStatus.APPROVED,
            expected_status=WorkLogStatus.PENDING,
        )
        if not transitioned:
            raise InvalidStateError(
                "WorkLog",
                work_log_id,
                None,
                WorkLogStatus.APPROVED.value,
                reason="work log was decided concurrently",
            )

        try:
            created = await self.store.create_payroll_entry(entry)
        except Exception:
            logger.exception(
                "Payroll entry creation failed for work log %s; reverting to pending",
                work_log_id,
            )
            await self._revert_approval(work_log_id)
            raise

        logger.info(
            "Approved work log %s: payroll entry %s, %s hours (%s), total %s",
            work_log_id,
            created.id,
            calculation.total_hours,
            calculation.category.value,
            created.total_amount,
        )
        return created

    async def reject(self, work_log_id: UUID, reason: str | None = None) -> WorkLogRecord:
        """Reject a pending work log, optionally recording why."""
        work_log = await self.get_work_log(work_log_id)
        WorkLogStateMachine.validate_transition(
            work_log_id, work_log.status, WorkLogStatus.REJECTED
        )

        note = f"Rejected: {reason}" if reason else None
        updated = await self.store.update_work_log_status(
            work_log_id,
            WorkLogStatus.REJECTED,
            note,
            expected_status=WorkLogStatus.PENDING,
        )
        if not updated:
            raise InvalidStateError(
                "WorkLog",
                work_log_id,
                None,
                WorkLogStatus.REJECTED.value,
                reason="work log was decided concurrently",
            )

        logger.info("Rejected work log %s", work_log_id)
        work_log.status = WorkLogStatus.REJECTED
        work_log.status_note = note
        return work_log

    async def _load_expenses(self, work_log_id: UUID) -> list[WorkLogExpenseRecord]:
        """Fetch expenses; a fetch failure degrades the expense total to zero."""
        try:
            return await self.store.list_expenses(work_log_id)
        except PersistenceFailure:
            logger.warning(
                "Could not load expenses for work log %s; expense total set to 0",
                work_log_id,
                exc_info=True,
            )
            return []

    async def _revert_approval(self, work_log_id: UUID) -> None:
        try:
            await self.store.update_work_log_status(
                work_log_id,
                WorkLogStatus.PENDING,
                expected_status=WorkLogStatus.APPROVED,
            )
        except Exception:
            logger.exception("Could not revert work log %s to pending", work_log_id)
