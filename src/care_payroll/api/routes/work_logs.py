"""Work log API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Response, status

from care_payroll.api.dependencies import Composer, Lifecycle, Store
from care_payroll.api.schemas import (
    ErrorResponse,
    ExpenseCreate,
    ExpenseResponse,
    ExpenseReview,
    PayrollEntryResponse,
    RejectRequest,
    WorkLogCreate,
    WorkLogResponse,
)

router = APIRouter(prefix="/work-logs", tags=["work-logs"])


# ============================================================================
# Work log CRUD
# ============================================================================


@router.post(
    "",
    response_model=WorkLogResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_work_log(lifecycle: Lifecycle, payload: WorkLogCreate) -> WorkLogResponse:
    """Record a pending work log."""
    work_log = await lifecycle.create_work_log(
        care_team_member_id=payload.care_team_member_id,
        care_plan_id=payload.care_plan_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        base_rate=payload.base_rate,
        rate_multiplier=payload.rate_multiplier,
        notes=payload.notes,
        shift_id=payload.shift_id,
    )
    return WorkLogResponse.model_validate(work_log)


@router.get(
    "/{work_log_id}",
    response_model=WorkLogResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_work_log(
    lifecycle: Lifecycle,
    work_log_id: Annotated[UUID, Path()],
) -> WorkLogResponse:
    """Get a work log with its expenses."""
    return WorkLogResponse.model_validate(await lifecycle.get_work_log(work_log_id))


# ============================================================================
# Expenses
# ============================================================================


@router.post(
    "/{work_log_id}/expenses",
    response_model=ExpenseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def add_expense(
    lifecycle: Lifecycle,
    work_log_id: Annotated[UUID, Path()],
    payload: ExpenseCreate,
) -> ExpenseResponse:
    """Attach an expense to a pending work log."""
    expense = await lifecycle.add_expense(
        work_log_id,
        payload.category,
        payload.amount,
        description=payload.description,
        receipt_url=payload.receipt_url,
    )
    return ExpenseResponse.model_validate(expense)


@router.post(
    "/expenses/{expense_id}/review",
    response_model=ExpenseResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def review_expense(
    lifecycle: Lifecycle,
    expense_id: Annotated[UUID, Path()],
    payload: ExpenseReview,
) -> ExpenseResponse:
    """Approve or reject a pending expense."""
    expense = await lifecycle.review_expense(expense_id, payload.approved)
    return ExpenseResponse.model_validate(expense)


# ============================================================================
# Work log decisions
# ============================================================================


@router.post(
    "/{work_log_id}/approve",
    response_model=PayrollEntryResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def approve_work_log(
    lifecycle: Lifecycle,
    work_log_id: Annotated[UUID, Path()],
) -> PayrollEntryResponse:
    """Approve a pending work log and create its payroll entry."""
    entry = await lifecycle.approve(work_log_id)
    return PayrollEntryResponse.model_validate(entry)


@router.post(
    "/{work_log_id}/reject",
    response_model=WorkLogResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def reject_work_log(
    lifecycle: Lifecycle,
    work_log_id: Annotated[UUID, Path()],
    payload: RejectRequest | None = None,
) -> WorkLogResponse:
    """Reject a pending work log."""
    reason = payload.reason if payload is not None else None
    work_log = await lifecycle.reject(work_log_id, reason)
    return WorkLogResponse.model_validate(work_log)


@router.get(
    "/{work_log_id}/receipt",
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def work_log_receipt(
    lifecycle: Lifecycle,
    store: Store,
    composer: Composer,
    work_log_id: Annotated[UUID, Path()],
) -> Response:
    """Render a receipt for a single work log (PDF or CSV)."""
    work_log = await lifecycle.get_work_log(work_log_id)
    rates = await store.get_caregiver_rates(work_log.care_team_member_id)
    content = composer.render_work_log(work_log, rates)
    return Response(
        content=content,
        media_type=composer.writer.media_type,
        headers={
            "Content-Disposition": (
                f'attachment; filename="work-log-{work_log_id}.{composer.writer.extension}"'
            )
        },
    )
