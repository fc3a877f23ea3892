"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from enum import Enum
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from care_payroll.calculators import HolidayCalendar, PayrollCalculator
from care_payroll.config import PayrollConfig, get_settings
from care_payroll.database import get_session
from care_payroll.documents import CsvDocumentWriter, PdfDocumentWriter
from care_payroll.holidays import load_holiday_calendar
from care_payroll.repositories import SqlAlchemyPayrollStore
from care_payroll.services import (
    DocumentWriter,
    PaymentProcessor,
    PayrollQueryService,
    ReceiptComposer,
    WorkLogLifecycle,
)


class ReceiptFormat(str, Enum):
    """Rendered receipt formats."""

    PDF = "pdf"
    CSV = "csv"


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency; commits when the request succeeds."""
    async with get_session() as session:
        yield session


def get_payroll_config() -> PayrollConfig:
    return get_settings().payroll


@lru_cache(maxsize=1)
def get_holiday_calendar() -> HolidayCalendar:
    """Holiday table, loaded once per process."""
    return load_holiday_calendar(get_settings().holidays_file)


def get_calculator(
    calendar: Annotated[HolidayCalendar, Depends(get_holiday_calendar)],
    config: Annotated[PayrollConfig, Depends(get_payroll_config)],
) -> PayrollCalculator:
    return PayrollCalculator(calendar, config)


def get_store(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> SqlAlchemyPayrollStore:
    return SqlAlchemyPayrollStore(session)


def get_document_writer(
    output_format: Annotated[ReceiptFormat, Query(alias="format")] = ReceiptFormat.PDF,
) -> DocumentWriter:
    if output_format == ReceiptFormat.CSV:
        return CsvDocumentWriter()
    return PdfDocumentWriter()


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Store = Annotated[SqlAlchemyPayrollStore, Depends(get_store)]
Calculator = Annotated[PayrollCalculator, Depends(get_calculator)]


def get_lifecycle(store: Store, calculator: Calculator) -> WorkLogLifecycle:
    return WorkLogLifecycle(store, calculator)


def get_payment_processor(store: Store) -> PaymentProcessor:
    return PaymentProcessor(store)


def get_query_service(
    store: Store,
    config: Annotated[PayrollConfig, Depends(get_payroll_config)],
) -> PayrollQueryService:
    return PayrollQueryService(store, config)


def get_receipt_composer(
    calculator: Calculator,
    writer: Annotated[DocumentWriter, Depends(get_document_writer)],
) -> ReceiptComposer:
    return ReceiptComposer(calculator, writer)


Lifecycle = Annotated[WorkLogLifecycle, Depends(get_lifecycle)]
Payments = Annotated[PaymentProcessor, Depends(get_payment_processor)]
Queries = Annotated[PayrollQueryService, Depends(get_query_service)]
Composer = Annotated[ReceiptComposer, Depends(get_receipt_composer)]
