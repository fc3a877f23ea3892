"""Care team, work log, expense and payroll entry models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from care_payroll.models.base import Base, TimestampMixin


class CareTeamMember(Base, TimestampMixin):
    """A caregiver attached to a care plan, with standing pay rates."""

    __tablename__ = "care_team_members"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    care_plan_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    caregiver_id: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    display_name: Mapped[str | None] = mapped_column(String, nullable=True)
    regular_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 4), nullable=True)
    overtime_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 4), nullable=True)

    work_logs: Mapped[list[WorkLog]] = relationship(back_populates="care_team_member")


class WorkLog(Base, TimestampMixin):
    """A recorded interval of caregiving work.

    Status moves pending -> approved or pending -> rejected, never back.
    """

    __tablename__ = "work_logs"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    care_team_member_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("care_team_members.id", ondelete="CASCADE"),
        nullable=False,
    )
    care_plan_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    shift_id: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    base_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 4), nullable=True)
    rate_multiplier: Mapped[Decimal | None] = mapped_column(Numeric(6, 4), nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status_note: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="work_logs_status_check",
        ),
        CheckConstraint("end_time > start_time", name="work_logs_interval_check"),
        CheckConstraint(
            "rate_multiplier IS NULL OR rate_multiplier >= 0",
            name="work_logs_multiplier_check",
        ),
        Index("ix_work_logs_care_plan", "care_plan_id"),
    )

    care_team_member: Mapped[CareTeamMember] = relationship(back_populates="work_logs")
    expenses: Mapped[list[WorkLogExpense]] = relationship(
        back_populates="work_log", order_by="WorkLogExpense.created_at"
    )


class WorkLogExpense(Base, TimestampMixin):
    """An out-of-pocket expense attached to a work log."""

    __tablename__ = "work_log_expenses"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    work_log_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("work_logs.id", ondelete="CASCADE"),
        nullable=False,
    )
    category: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    receipt_url: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")

    __table_args__ = (
        CheckConstraint(
            "category IN ('medical_supplies', 'food', 'transportation', 'other')",
            name="work_log_expenses_category_check",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="work_log_expenses_status_check",
        ),
        CheckConstraint("amount > 0", name="work_log_expenses_amount_check"),
    )

    work_log: Mapped[WorkLog] = relationship(back_populates="expenses")


class PayrollEntry(Base, TimestampMixin):
    """Computed pay for exactly one approved work log.

    Created once at approval; only payment_status and payment_date change
    afterwards.
    """

    __tablename__ = "payroll_entries"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    work_log_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("work_logs.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    care_team_member_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("care_team_members.id", ondelete="CASCADE"),
        nullable=False,
    )
    care_plan_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    period_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    period_end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    regular_hours: Mapped[Decimal] = mapped_column(Numeric(18, 10), nullable=False, default=0)
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(18, 10), nullable=False, default=0)
    holiday_hours: Mapped[Decimal] = mapped_column(Numeric(18, 10), nullable=False, default=0)
    shadow_hours: Mapped[Decimal] = mapped_column(Numeric(18, 10), nullable=False, default=0)

    regular_rate: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    overtime_rate: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False, default=0)
    holiday_rate: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False, default=0)
    shadow_rate: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False, default=0)

    expense_total: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False, default=0)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)

    payment_status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    payment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "payment_status IN ('pending', 'approved', 'paid')",
            name="payroll_entries_payment_status_check",
        ),
        Index("ix_payroll_entries_care_plan", "care_plan_id"),
    )

    care_team_member: Mapped[CareTeamMember] = relationship()
