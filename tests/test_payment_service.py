"""Tests for payroll entry payment processing."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from care_payroll.calculators.types import PaymentStatus
from care_payroll.exceptions import InvalidStateError, NotFoundError
from care_payroll.services import PaymentProcessor, WorkLogLifecycle


@pytest.fixture
def payments(memory_store) -> PaymentProcessor:
    return PaymentProcessor(memory_store)


@pytest.fixture
def entry(memory_store, make_entry):
    entry = make_entry()
    memory_store.entries[entry.id] = entry
    return entry


class TestPaymentProcessor:
    """Test payment status transitions."""

    async def test_pay_pending_entry(self, payments, memory_store, entry):
        paid_at = datetime(2024, 7, 15, 12, 0, tzinfo=timezone.utc)

        result = await payments.pay(entry.id, paid_at)

        assert result.payment_status == PaymentStatus.PAID
        assert result.payment_date == paid_at
        assert memory_store.entries[entry.id].payment_status == PaymentStatus.PAID

    async def test_pay_defaults_to_now(self, payments, entry):
        before = datetime.now(timezone.utc)

        result = await payments.pay(entry.id)

        assert result.payment_date >= before

    async def test_approve_then_pay(self, payments, memory_store, entry):
        approved = await payments.approve_payment(entry.id)
        assert approved.payment_status == PaymentStatus.APPROVED
        assert approved.payment_date is None

        paid = await payments.pay(entry.id)
        assert paid.payment_status == PaymentStatus.PAID

    async def test_pay_twice_rejected(self, payments, memory_store, entry):
        first = datetime(2024, 7, 15, tzinfo=timezone.utc)
        await payments.pay(entry.id, first)

        with pytest.raises(InvalidStateError) as exc_info:
            await payments.pay(entry.id)

        assert exc_info.value.current_status == "paid"
        assert memory_store.entries[entry.id].payment_date == first

    async def test_approve_paid_entry_rejected(self, payments, entry):
        await payments.pay(entry.id)

        with pytest.raises(InvalidStateError):
            await payments.approve_payment(entry.id)

    async def test_missing_entry(self, payments):
        with pytest.raises(NotFoundError) as exc_info:
            await payments.pay(uuid4())

        assert exc_info.value.entity == "PayrollEntry"

    async def test_concurrent_payment_loses(self, payments, memory_store, entry):
        """Test that a stale read cannot pay an entry twice."""
        original = memory_store.update_payroll_payment_status

        async def paid_elsewhere(entry_id, status, payment_date, *, expected_statuses=None):
            memory_store.entries[entry_id].payment_status = PaymentStatus.PAID
            return await original(
                entry_id, status, payment_date, expected_statuses=expected_statuses
            )

        memory_store.update_payroll_payment_status = paid_elsewhere

        with pytest.raises(InvalidStateError):
            await payments.pay(entry.id)


class TestPaymentWithDatabase:
    """Test payment over the SQLAlchemy store."""

    async def test_pay_persists(self, store, calculator, member, care_plan_id, make_work_log):
        lifecycle = WorkLogLifecycle(store, calculator)
        work_log = make_work_log(care_team_member_id=member.id, care_plan_id=care_plan_id)
        await store.create_work_log(work_log)
        entry = await lifecycle.approve(work_log.id)

        paid_at = datetime(2024, 7, 20, 10, 30)
        await PaymentProcessor(store).pay(entry.id, paid_at)

        stored = await store.get_payroll_entry(entry.id)
        assert stored.payment_status == PaymentStatus.PAID
        assert stored.payment_date == paid_at
