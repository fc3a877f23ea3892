"""Payroll entry API endpoints."""

from datetime import date
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, Response

from care_payroll.api.dependencies import Composer, Payments, Queries, Store
from care_payroll.api.schemas import (
    ErrorResponse,
    PayRequest,
    PayrollEntryListResponse,
    PayrollEntryResponse,
)
from care_payroll.exceptions import NotFoundError
from care_payroll.services import ReceiptComposer

router = APIRouter(tags=["payroll"])


def _document_response(composer: ReceiptComposer, content: bytes, name: str) -> Response:
    return Response(
        content=content,
        media_type=composer.writer.media_type,
        headers={
            "Content-Disposition": (
                f'attachment; filename="{name}.{composer.writer.extension}"'
            )
        },
    )


# ============================================================================
# Care plan payroll
# ============================================================================


@router.get(
    "/care-plans/{care_plan_id}/payroll-entries",
    response_model=PayrollEntryListResponse,
)
async def list_payroll_entries(
    queries: Queries,
    care_plan_id: Annotated[UUID, Path()],
    caregiver_name: str | None = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
) -> PayrollEntryListResponse:
    """List a care plan's payroll entries, optionally filtered."""
    entries = await queries.list_entries(care_plan_id, caregiver_name, date_from, date_to)
    return PayrollEntryListResponse(
        items=[PayrollEntryResponse.model_validate(entry) for entry in entries],
        total=len(entries),
        total_amount=sum((entry.total_amount for entry in entries), Decimal("0")),
    )


@router.get(
    "/care-plans/{care_plan_id}/payroll-report",
    responses={422: {"model": ErrorResponse}},
)
async def payroll_report(
    queries: Queries,
    composer: Composer,
    care_plan_id: Annotated[UUID, Path()],
    caregiver_name: str | None = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
) -> Response:
    """Render one consolidated receipt for the matching payroll entries."""
    entries = await queries.list_entries(care_plan_id, caregiver_name, date_from, date_to)
    content = composer.render_consolidated(entries)
    return _document_response(composer, content, f"payroll-report-{care_plan_id}")


# ============================================================================
# Payroll entry payment
# ============================================================================


@router.get(
    "/payroll-entries/{entry_id}",
    response_model=PayrollEntryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_entry(
    store: Store,
    entry_id: Annotated[UUID, Path()],
) -> PayrollEntryResponse:
    """Get a payroll entry."""
    entry = await store.get_payroll_entry(entry_id)
    if entry is None:
        raise NotFoundError("PayrollEntry", entry_id)
    return PayrollEntryResponse.model_validate(entry)


@router.post(
    "/payroll-entries/{entry_id}/approve-payment",
    response_model=PayrollEntryResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def approve_payment(
    payments: Payments,
    entry_id: Annotated[UUID, Path()],
) -> PayrollEntryResponse:
    """Approve a pending payroll entry for payment."""
    return PayrollEntryResponse.model_validate(await payments.approve_payment(entry_id))


@router.post(
    "/payroll-entries/{entry_id}/pay",
    response_model=PayrollEntryResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def pay_entry(
    payments: Payments,
    entry_id: Annotated[UUID, Path()],
    payload: PayRequest | None = None,
) -> PayrollEntryResponse:
    """Mark a payroll entry as paid."""
    payment_date = payload.payment_date if payload is not None else None
    return PayrollEntryResponse.model_validate(await payments.pay(entry_id, payment_date))


@router.get(
    "/payroll-entries/{entry_id}/receipt",
    responses={404: {"model": ErrorResponse}},
)
async def payroll_entry_receipt(
    store: Store,
    composer: Composer,
    entry_id: Annotated[UUID, Path()],
) -> Response:
    """Render a receipt for a payroll entry (PDF or CSV)."""
    entry = await store.get_payroll_entry(entry_id)
    if entry is None:
        raise NotFoundError("PayrollEntry", entry_id)
    return _document_response(composer, composer.render_entry(entry), f"payroll-entry-{entry_id}")
