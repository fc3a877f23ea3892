"""Pydantic schemas for API request/response models."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from care_payroll.calculators.types import (
    ExpenseCategory,
    ExpenseStatus,
    PaymentStatus,
    WorkLogStatus,
)


# ============================================================================
# Work log schemas
# ============================================================================


class WorkLogCreate(BaseModel):
    """Schema for recording a work interval."""

    care_team_member_id: UUID
    care_plan_id: UUID
    start_time: datetime
    end_time: datetime
    base_rate: Decimal | None = Field(default=None, ge=0)
    rate_multiplier: Decimal | None = Field(default=None, ge=0)
    shift_id: UUID | None = None
    notes: str | None = None


class ExpenseCreate(BaseModel):
    """Schema for attaching an expense to a work log."""

    category: ExpenseCategory
    amount: Decimal = Field(gt=0)
    description: str = ""
    receipt_url: str | None = None


class ExpenseReview(BaseModel):
    """Schema for approving or rejecting an expense."""

    approved: bool


class RejectRequest(BaseModel):
    """Schema for rejecting a work log."""

    reason: str | None = None


class ExpenseResponse(BaseModel):
    """Schema for expense response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    work_log_id: UUID
    category: ExpenseCategory
    amount: Decimal
    description: str
    status: ExpenseStatus
    receipt_url: str | None = None
    created_at: datetime | None = None


class WorkLogResponse(BaseModel):
    """Schema for work log response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    care_team_member_id: UUID
    care_plan_id: UUID
    shift_id: UUID | None = None
    start_time: datetime
    end_time: datetime
    status: WorkLogStatus
    base_rate: Decimal | None = None
    rate_multiplier: Decimal | None = None
    notes: str | None = None
    status_note: str | None = None
    caregiver_name: str | None = None
    expenses: list[ExpenseResponse] = []
    created_at: datetime | None = None


# ============================================================================
# Payroll entry schemas
# ============================================================================


class PayRequest(BaseModel):
    """Schema for marking a payroll entry paid."""

    payment_date: datetime | None = None


class PayrollEntryResponse(BaseModel):
    """Schema for payroll entry response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    work_log_id: UUID
    care_team_member_id: UUID
    care_plan_id: UUID
    caregiver_name: str | None = None
    period_start: datetime
    period_end: datetime
    regular_hours: Decimal
    overtime_hours: Decimal
    holiday_hours: Decimal
    shadow_hours: Decimal
    total_hours: Decimal
    regular_rate: Decimal
    overtime_rate: Decimal
    holiday_rate: Decimal
    shadow_rate: Decimal
    expense_total: Decimal
    total_amount: Decimal
    payment_status: PaymentStatus
    payment_date: datetime | None = None
    created_at: datetime | None = None


class PayrollEntryListResponse(BaseModel):
    """Schema for listing payroll entries."""

    items: list[PayrollEntryResponse]
    total: int
    total_amount: Decimal


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
