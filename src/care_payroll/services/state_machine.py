"""Work log and payment state machines with transition validation."""

from __future__ import annotations

from typing import Any

from care_payroll.calculators.types import PaymentStatus, WorkLogStatus
from care_payroll.exceptions import InvalidStateError


def _value(status: Any) -> str:
    return status.value if hasattr(status, "value") else str(status)


class WorkLogStateMachine:
    """State machine for work log status transitions.

    Allowed transitions:
    - pending → approved
    - pending → rejected

    Approved and rejected are terminal; nothing reopens a decided log.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        "pending": ["approved", "rejected"],
        "approved": [],
        "rejected": [],
    }

    # Work logs accept new expenses only in these statuses
    EXPENSES_MUTABLE = {"pending"}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(_value(from_status), [])
        return _value(to_status) in allowed

    @classmethod
    def validate_transition(
        cls, work_log_id: Any, from_status: str, to_status: str
    ) -> None:
        """Validate a transition, raising InvalidStateError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidStateError(
                "WorkLog", work_log_id, _value(from_status), _value(to_status)
            )

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(_value(status), [])

    @classmethod
    def can_add_expenses(cls, status: str) -> bool:
        return _value(status) in cls.EXPENSES_MUTABLE

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[WorkLogStatus]:
        """Get list of valid next statuses from current status."""
        return [
            WorkLogStatus(status)
            for status in cls.VALID_TRANSITIONS.get(_value(current_status), [])
        ]


class ExpenseStateMachine:
    """Review transitions for a single expense: pending → approved | rejected.

    Independent of the owning work log's status.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        "pending": ["approved", "rejected"],
        "approved": [],
        "rejected": [],
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        return _value(to_status) in cls.VALID_TRANSITIONS.get(_value(from_status), [])

    @classmethod
    def validate_transition(
        cls, expense_id: Any, from_status: str, to_status: str
    ) -> None:
        if not cls.can_transition(from_status, to_status):
            raise InvalidStateError(
                "WorkLogExpense", expense_id, _value(from_status), _value(to_status)
            )


class PaymentStateMachine:
    """State machine for payroll entry payment status.

    Allowed transitions:
    - pending → approved
    - pending → paid
    - approved → paid

    Paid is terminal.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        "pending": ["approved", "paid"],
        "approved": ["paid"],
        "paid": [],
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        return _value(to_status) in cls.VALID_TRANSITIONS.get(_value(from_status), [])

    @classmethod
    def validate_transition(
        cls, entry_id: Any, from_status: str, to_status: str
    ) -> None:
        if not cls.can_transition(from_status, to_status):
            raise InvalidStateError(
                "PayrollEntry", entry_id, _value(from_status), _value(to_status)
            )

    @classmethod
    def sources_for(cls, to_status: str) -> tuple[PaymentStatus, ...]:
        """Statuses from which ``to_status`` is reachable."""
        return tuple(
            PaymentStatus(status)
            for status, targets in cls.VALID_TRANSITIONS.items()
            if _value(to_status) in targets
        )
