"""Typed exceptions raised by the care payroll engine.

Every error carries a machine-readable ``code`` plus the structured fields
that produced it, so callers can branch on type and report without parsing
messages:

    CarePayrollError
    +-- NotFoundError
    +-- InvalidStateError
    +-- CalculationError
    +-- PersistenceFailure
    +-- ReceiptError
"""

from __future__ import annotations

from typing import Any


class CarePayrollError(Exception):
    """Base class for all engine errors."""

    code: str = "CARE_PAYROLL_ERROR"


class NotFoundError(CarePayrollError):
    """Raised when a referenced work log, expense or payroll entry does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class InvalidStateError(CarePayrollError):
    """Raised when a record is not in the source state an operation requires."""

    code = "INVALID_STATE"

    def __init__(
        self,
        entity: str,
        entity_id: Any,
        current_status: str | None,
        target_status: str,
        reason: str | None = None,
    ):
        self.entity = entity
        self.entity_id = entity_id
        self.current_status = current_status
        self.target_status = target_status
        self.reason = reason
        msg = (
            f"Cannot move {entity} {entity_id} from '{current_status}' "
            f"to '{target_status}'"
        )
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class CalculationError(CarePayrollError):
    """Raised when work log data cannot be turned into pay."""

    code = "CALCULATION_ERROR"

    def __init__(self, reason: str, work_log_id: Any = None):
        self.reason = reason
        self.work_log_id = work_log_id
        if work_log_id is not None:
            super().__init__(f"Work log {work_log_id}: {reason}")
        else:
            super().__init__(reason)


class PersistenceFailure(CarePayrollError):
    """Raised by a persistence port when a read or write fails."""

    code = "PERSISTENCE_FAILURE"

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        msg = f"Persistence operation '{operation}' failed"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class ReceiptError(CarePayrollError):
    """Raised when a receipt cannot be composed from the given records."""

    code = "RECEIPT_ERROR"
