"""Plain value types exchanged between the calculator, services and ports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

ZERO = Decimal("0")


class WorkLogStatus(str, Enum):
    """Work log approval status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ExpenseStatus(str, Enum):
    """Expense review status (independent of the work log's)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ExpenseCategory(str, Enum):
    """Expense categories."""

    MEDICAL_SUPPLIES = "medical_supplies"
    FOOD = "food"
    TRANSPORTATION = "transportation"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class PaymentStatus(str, Enum):
    """Payroll entry payment status."""

    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"


class HourCategory(str, Enum):
    """Rate tier that consumed a work log's hours."""

    REGULAR = "regular"
    OVERTIME = "overtime"
    HOLIDAY = "holiday"
    SHADOW = "shadow"


@dataclass(frozen=True)
class Holiday:
    """A recognized holiday and its pay premium."""

    date: date
    name: str
    pay_multiplier: Decimal


@dataclass(frozen=True)
class CaregiverRates:
    """Standing rates of a care team member (either may be unset)."""

    regular_rate: Decimal | None = None
    overtime_rate: Decimal | None = None


@dataclass
class WorkLogExpenseRecord:
    """An expense attached to a work log."""

    id: UUID
    work_log_id: UUID
    category: ExpenseCategory
    amount: Decimal
    description: str = ""
    status: ExpenseStatus = ExpenseStatus.PENDING
    receipt_url: str | None = None
    created_at: datetime | None = None


@dataclass
class WorkLogRecord:
    """A single recorded work interval."""

    id: UUID
    care_team_member_id: UUID
    care_plan_id: UUID
    start_time: datetime
    end_time: datetime
    status: WorkLogStatus = WorkLogStatus.PENDING
    base_rate: Decimal | None = None
    rate_multiplier: Decimal | None = None
    shift_id: UUID | None = None
    notes: str | None = None
    status_note: str | None = None
    caregiver_name: str | None = None
    expenses: list[WorkLogExpenseRecord] = field(default_factory=list)
    created_at: datetime | None = None


@dataclass(frozen=True)
class ShiftRecord:
    """A scheduled shift a work log can be derived from."""

    id: UUID
    care_team_member_id: UUID
    care_plan_id: UUID
    start_time: datetime
    end_time: datetime
    base_rate: Decimal | None = None
    rate_multiplier: Decimal | None = None


@dataclass(frozen=True)
class PayrollCalculation:
    """Hours by category and resolved rates for one work log.

    Exactly one hour bucket is non-zero (unless the interval is empty).
    Values keep full precision; rounding happens on receipts only.
    """

    category: HourCategory
    total_hours: Decimal
    regular_hours: Decimal
    overtime_hours: Decimal
    holiday_hours: Decimal
    shadow_hours: Decimal
    regular_rate: Decimal
    overtime_rate: Decimal
    holiday_rate: Decimal
    shadow_rate: Decimal
    effective_rate: Decimal
    effective_multiplier: Decimal
    expense_total: Decimal
    work_date: date
    holiday: Holiday | None = None
    is_shadow_day: bool = False

    @property
    def is_holiday(self) -> bool:
        return self.holiday is not None

    @property
    def rate_label(self) -> str:
        """Rate type shown on receipts."""
        if self.is_holiday and self.is_shadow_day:
            return "Shadow Day on Holiday"
        if self.is_holiday:
            return "Holiday"
        if self.is_shadow_day:
            return "Shadow Day"
        if self.category == HourCategory.OVERTIME:
            return "Overtime"
        return "Regular"

    @property
    def applied_rate(self) -> Decimal:
        """Rate of the tier that consumed the hours."""
        return {
            HourCategory.REGULAR: self.regular_rate,
            HourCategory.OVERTIME: self.overtime_rate,
            HourCategory.HOLIDAY: self.holiday_rate,
            HourCategory.SHADOW: self.shadow_rate,
        }[self.category]

    @property
    def hours_amount(self) -> Decimal:
        return (
            self.regular_hours * self.regular_rate
            + self.overtime_hours * self.overtime_rate
            + self.holiday_hours * self.holiday_rate
            + self.shadow_hours * self.shadow_rate
        )

    @property
    def total_amount(self) -> Decimal:
        return self.hours_amount + self.expense_total


@dataclass
class PayrollEntryRecord:
    """The persisted monetary result of one approved work log."""

    id: UUID
    work_log_id: UUID
    care_team_member_id: UUID
    care_plan_id: UUID
    period_start: datetime
    period_end: datetime
    regular_hours: Decimal
    overtime_hours: Decimal
    holiday_hours: Decimal
    shadow_hours: Decimal
    regular_rate: Decimal
    overtime_rate: Decimal
    holiday_rate: Decimal
    shadow_rate: Decimal
    expense_total: Decimal
    total_amount: Decimal
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_date: datetime | None = None
    caregiver_name: str | None = None
    created_at: datetime | None = None

    @property
    def total_hours(self) -> Decimal:
        return self.regular_hours + self.overtime_hours + self.holiday_hours + self.shadow_hours

    def hours_by_category(self) -> dict[HourCategory, tuple[Decimal, Decimal]]:
        """Return (hours, rate) per category in a fixed order."""
        return {
            HourCategory.REGULAR: (self.regular_hours, self.regular_rate),
            HourCategory.OVERTIME: (self.overtime_hours, self.overtime_rate),
            HourCategory.HOLIDAY: (self.holiday_hours, self.holiday_rate),
            HourCategory.SHADOW: (self.shadow_hours, self.shadow_rate),
        }
