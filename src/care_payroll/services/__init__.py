"""Care payroll services."""

from care_payroll.services.payment_service import PaymentProcessor
from care_payroll.services.payroll_query import PayrollQueryService, filter_payroll_entries
from care_payroll.services.ports import DocumentWriter, PayrollStore
from care_payroll.services.receipt_service import ReceiptComposer
from care_payroll.services.state_machine import (
    ExpenseStateMachine,
    PaymentStateMachine,
    WorkLogStateMachine,
)
from care_payroll.services.work_log_service import WorkLogLifecycle

__all__ = [
    "DocumentWriter",
    "ExpenseStateMachine",
    "PaymentProcessor",
    "PaymentStateMachine",
    "PayrollQueryService",
    "PayrollStore",
    "ReceiptComposer",
    "WorkLogLifecycle",
    "WorkLogStateMachine",
    "filter_payroll_entries",
]
