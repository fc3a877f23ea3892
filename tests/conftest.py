"""Pytest fixtures for care payroll tests."""

from __future__ import annotations

import dataclasses
from datetime import datetime, timedelta
from decimal import Decimal
from typing import AsyncGenerator
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from care_payroll.calculators import HolidayCalendar, PayrollCalculator
from care_payroll.calculators.types import (
    CaregiverRates,
    ExpenseStatus,
    Holiday,
    PaymentStatus,
    PayrollEntryRecord,
    WorkLogExpenseRecord,
    WorkLogRecord,
    WorkLogStatus,
)
from care_payroll.config import PayrollConfig
from care_payroll.exceptions import PersistenceFailure
from care_payroll.models import Base, CareTeamMember
from care_payroll.repositories import SqlAlchemyPayrollStore

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Thursday
INDEPENDENCE_DAY = datetime(2024, 7, 4, 8, 0)
# Tuesday
REGULAR_DAY = datetime(2024, 7, 2, 9, 0)
# Saturday
SATURDAY = datetime(2024, 7, 6, 9, 0)


@pytest.fixture
async def engine():
    """Create a fresh test database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store(session) -> SqlAlchemyPayrollStore:
    return SqlAlchemyPayrollStore(session)


@pytest.fixture
def care_plan_id() -> UUID:
    return uuid4()


@pytest.fixture
async def member(session, care_plan_id) -> CareTeamMember:
    """Care team member with an $18 standing rate and no overtime rate."""
    member = CareTeamMember(
        id=uuid4(),
        care_plan_id=care_plan_id,
        caregiver_id=uuid4(),
        display_name="Alice Johnson",
        regular_rate=Decimal("18.00"),
        overtime_rate=None,
    )
    session.add(member)
    await session.commit()
    return member


@pytest.fixture
async def second_member(session, care_plan_id) -> CareTeamMember:
    """Care team member with no standing rates."""
    member = CareTeamMember(
        id=uuid4(),
        care_plan_id=care_plan_id,
        caregiver_id=uuid4(),
        display_name="Bob Smith",
    )
    session.add(member)
    await session.commit()
    return member


# ============================================================================
# Calculation fixtures
# ============================================================================


@pytest.fixture
def payroll_config() -> PayrollConfig:
    return PayrollConfig()


@pytest.fixture
def holiday_calendar() -> HolidayCalendar:
    return HolidayCalendar(
        [
            Holiday(datetime(2024, 7, 4).date(), "Independence Day", Decimal("1.5")),
            Holiday(datetime(2024, 12, 25).date(), "Christmas Day", Decimal("2.0")),
        ]
    )


@pytest.fixture
def calculator(holiday_calendar, payroll_config) -> PayrollCalculator:
    return PayrollCalculator(holiday_calendar, payroll_config)


@pytest.fixture
def make_work_log():
    """Factory for unsaved work log records."""

    def _make(
        start_time: datetime = REGULAR_DAY,
        hours: float = 8,
        **overrides,
    ) -> WorkLogRecord:
        values = dict(
            id=uuid4(),
            care_team_member_id=uuid4(),
            care_plan_id=uuid4(),
            start_time=start_time,
            end_time=start_time + timedelta(hours=hours),
            status=WorkLogStatus.PENDING,
            base_rate=Decimal("20"),
            rate_multiplier=None,
            caregiver_name="Alice Johnson",
        )
        values.update(overrides)
        return WorkLogRecord(**values)

    return _make


@pytest.fixture
def make_entry():
    """Factory for payroll entry records."""

    def _make(
        period_start: datetime = REGULAR_DAY,
        hours: Decimal = Decimal("8"),
        rate: Decimal = Decimal("20"),
        **overrides,
    ) -> PayrollEntryRecord:
        values = dict(
            id=uuid4(),
            work_log_id=uuid4(),
            care_team_member_id=uuid4(),
            care_plan_id=uuid4(),
            period_start=period_start,
            period_end=period_start + timedelta(hours=float(hours)),
            regular_hours=hours,
            overtime_hours=Decimal("0"),
            holiday_hours=Decimal("0"),
            shadow_hours=Decimal("0"),
            regular_rate=rate,
            overtime_rate=rate * Decimal("1.5"),
            holiday_rate=Decimal("0"),
            shadow_rate=Decimal("0"),
            expense_total=Decimal("0"),
            total_amount=hours * rate,
            caregiver_name="Alice Johnson",
        )
        values.update(overrides)
        return PayrollEntryRecord(**values)

    return _make


# ============================================================================
# In-memory persistence port
# ============================================================================


class InMemoryPayrollStore:
    """PayrollStore kept in dicts, with switches to inject failures."""

    def __init__(self):
        self.work_logs: dict[UUID, WorkLogRecord] = {}
        self.expenses: dict[UUID, WorkLogExpenseRecord] = {}
        self.entries: dict[UUID, PayrollEntryRecord] = {}
        self.rates: dict[UUID, CaregiverRates] = {}
        self.fail_create_entry = False
        self.fail_list_expenses = False
        self.fail_revert = False
        # Called right before a conditional work log update is applied
        self.before_status_update = None

    async def get_work_log(self, work_log_id, *, with_expenses=True):
        work_log = self.work_logs.get(work_log_id)
        if work_log is None:
            return None
        if not with_expenses:
            return dataclasses.replace(work_log, expenses=[])
        if self.fail_list_expenses:
            raise PersistenceFailure("get_work_log")
        return dataclasses.replace(
            work_log,
            expenses=[e for e in self.expenses.values() if e.work_log_id == work_log_id],
        )

    async def create_work_log(self, work_log):
        self.work_logs[work_log.id] = dataclasses.replace(work_log)
        return await self.get_work_log(work_log.id)

    async def update_work_log_status(self, work_log_id, status, note=None, *, expected_status=None):
        if self.before_status_update is not None:
            hook, self.before_status_update = self.before_status_update, None
            hook(work_log_id)
        if self.fail_revert and status == WorkLogStatus.PENDING:
            raise PersistenceFailure("update_work_log_status")
        work_log = self.work_logs.get(work_log_id)
        if work_log is None:
            return False
        if expected_status is not None and work_log.status != expected_status:
            return False
        work_log.status = WorkLogStatus(status)
        if note is not None:
            work_log.status_note = note
        return True

    async def add_expense(self, expense):
        self.expenses[expense.id] = dataclasses.replace(expense)
        return expense

    async def get_expense(self, expense_id):
        expense = self.expenses.get(expense_id)
        return dataclasses.replace(expense) if expense is not None else None

    async def update_expense_status(self, expense_id, status, *, expected_status=None):
        expense = self.expenses.get(expense_id)
        if expense is None:
            return False
        if expected_status is not None and expense.status != expected_status:
            return False
        expense.status = ExpenseStatus(status)
        return True

    async def list_expenses(self, work_log_id):
        if self.fail_list_expenses:
            raise PersistenceFailure("list_expenses")
        return [e for e in self.expenses.values() if e.work_log_id == work_log_id]

    async def get_caregiver_rates(self, care_team_member_id):
        return self.rates.get(care_team_member_id, CaregiverRates())

    async def create_payroll_entry(self, entry):
        if self.fail_create_entry:
            raise PersistenceFailure("create_payroll_entry")
        if any(e.work_log_id == entry.work_log_id for e in self.entries.values()):
            raise PersistenceFailure("create_payroll_entry")
        self.entries[entry.id] = dataclasses.replace(entry)
        return entry

    async def get_payroll_entry(self, entry_id):
        entry = self.entries.get(entry_id)
        return dataclasses.replace(entry) if entry is not None else None

    async def get_payroll_entry_for_work_log(self, work_log_id):
        for entry in self.entries.values():
            if entry.work_log_id == work_log_id:
                return dataclasses.replace(entry)
        return None

    async def update_payroll_payment_status(
        self, entry_id, status, payment_date, *, expected_statuses=None
    ):
        entry = self.entries.get(entry_id)
        if entry is None:
            return False
        if expected_statuses is not None and entry.payment_status not in expected_statuses:
            return False
        entry.payment_status = PaymentStatus(status)
        if payment_date is not None:
            entry.payment_date = payment_date
        return True

    async def list_payroll_entries(self, care_plan_id):
        return [e for e in self.entries.values() if e.care_plan_id == care_plan_id]


@pytest.fixture
def memory_store() -> InMemoryPayrollStore:
    return InMemoryPayrollStore()
