"""Tests for work log, expense and payment state machines."""

import pytest

from care_payroll.calculators.types import ExpenseStatus, PaymentStatus, WorkLogStatus
from care_payroll.exceptions import InvalidStateError
from care_payroll.services.state_machine import (
    ExpenseStateMachine,
    PaymentStateMachine,
    WorkLogStateMachine,
)


class TestWorkLogStateMachine:
    """Test work log transitions."""

    def test_valid_transitions(self):
        """Test that valid transitions are allowed."""
        # pending → approved
        assert WorkLogStateMachine.can_transition("pending", "approved") is True

        # pending → rejected
        assert WorkLogStateMachine.can_transition(
            WorkLogStatus.PENDING, WorkLogStatus.REJECTED
        ) is True

    def test_invalid_transitions(self):
        """Test that decided logs never move again."""
        assert WorkLogStateMachine.can_transition("approved", "pending") is False
        assert WorkLogStateMachine.can_transition("approved", "rejected") is False
        assert WorkLogStateMachine.can_transition("rejected", "approved") is False
        assert WorkLogStateMachine.can_transition("pending", "pending") is False

    def test_validate_transition_raises(self):
        """Test that validate_transition raises for invalid transitions."""
        with pytest.raises(InvalidStateError) as exc_info:
            WorkLogStateMachine.validate_transition(
                "wl-1", WorkLogStatus.APPROVED, WorkLogStatus.APPROVED
            )

        assert exc_info.value.entity == "WorkLog"
        assert exc_info.value.current_status == "approved"
        assert exc_info.value.target_status == "approved"
        assert exc_info.value.code == "INVALID_STATE"

    def test_terminal_statuses(self):
        assert WorkLogStateMachine.is_terminal("pending") is False
        assert WorkLogStateMachine.is_terminal("approved") is True
        assert WorkLogStateMachine.is_terminal(WorkLogStatus.REJECTED) is True

    def test_can_add_expenses(self):
        """Test expense attachment allowed statuses."""
        assert WorkLogStateMachine.can_add_expenses(WorkLogStatus.PENDING) is True
        assert WorkLogStateMachine.can_add_expenses(WorkLogStatus.APPROVED) is False
        assert WorkLogStateMachine.can_add_expenses("rejected") is False

    def test_get_next_statuses(self):
        assert WorkLogStateMachine.get_next_statuses("pending") == [
            WorkLogStatus.APPROVED,
            WorkLogStatus.REJECTED,
        ]
        assert WorkLogStateMachine.get_next_statuses("approved") == []


class TestExpenseStateMachine:
    """Test expense review transitions."""

    def test_review_from_pending_only(self):
        assert ExpenseStateMachine.can_transition("pending", ExpenseStatus.APPROVED) is True
        assert ExpenseStateMachine.can_transition("pending", ExpenseStatus.REJECTED) is True
        assert ExpenseStateMachine.can_transition("approved", ExpenseStatus.REJECTED) is False

    def test_validate_transition_raises(self):
        with pytest.raises(InvalidStateError) as exc_info:
            ExpenseStateMachine.validate_transition("e-1", "rejected", "approved")

        assert exc_info.value.entity == "WorkLogExpense"


class TestPaymentStateMachine:
    """Test payment status transitions."""

    def test_valid_transitions(self):
        assert PaymentStateMachine.can_transition("pending", "approved") is True
        assert PaymentStateMachine.can_transition("pending", "paid") is True
        assert PaymentStateMachine.can_transition("approved", "paid") is True

    def test_paid_is_terminal(self):
        assert PaymentStateMachine.can_transition("paid", "paid") is False
        assert PaymentStateMachine.can_transition("paid", "pending") is False
        assert PaymentStateMachine.can_transition("approved", "pending") is False

    def test_sources_for(self):
        """Test which statuses can reach each target."""
        assert set(PaymentStateMachine.sources_for(PaymentStatus.PAID)) == {
            PaymentStatus.PENDING,
            PaymentStatus.APPROVED,
        }
        assert PaymentStateMachine.sources_for(PaymentStatus.APPROVED) == (
            PaymentStatus.PENDING,
        )
        assert PaymentStateMachine.sources_for(PaymentStatus.PENDING) == ()
