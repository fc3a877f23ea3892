"""Payroll entry payment processing."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from care_payroll.calculators.types import PaymentStatus, PayrollEntryRecord
from care_payroll.exceptions import InvalidStateError, NotFoundError
from care_payroll.services.ports import PayrollStore
from care_payroll.services.state_machine import PaymentStateMachine

logger = logging.getLogger(__name__)


class PaymentProcessor:
    """Advances payroll entries through pending → approved → paid.

    Each transition is a single conditional update; a concurrent writer
    that got there first makes the loser fail with InvalidStateError.
    """

    def __init__(self, store: PayrollStore):
        self.store = store

    async def approve_payment(self, entry_id: UUID) -> PayrollEntryRecord:
        """Mark a pending payroll entry as approved for payment."""
        return await self._advance(entry_id, PaymentStatus.APPROVED, None)

    async def pay(
        self, entry_id: UUID, payment_date: datetime | None = None
    ) -> PayrollEntryRecord:
        """Mark a payroll entry as paid.

        Args:
            entry_id: The payroll entry to pay
            payment_date: When payment happened (default now, UTC)

        Raises:
            NotFoundError: If the entry does not exist
            InvalidStateError: If the entry is already paid
        """
        if payment_date is None:
            payment_date = datetime.now(timezone.utc)
        return await self._advance(entry_id, PaymentStatus.PAID, payment_date)

    async def _advance(
        self,
        entry_id: UUID,
        target: PaymentStatus,
        payment_date: datetime | None,
    ) -> PayrollEntryRecord:
        entry = await self.store.get_payroll_entry(entry_id)
        if entry is None:
            raise NotFoundError("PayrollEntry", entry_id)

        PaymentStateMachine.validate_transition(entry_id, entry.payment_status, target)

        updated = await self.store.update_payroll_payment_status(
            entry_id,
            target,
            payment_date,
            expected_statuses=PaymentStateMachine.sources_for(target),
        )
        if not updated:
            raise InvalidStateError(
                "PayrollEntry",
                entry_id,
                None,
                target.value,
                reason="payment status changed concurrently",
            )

        logger.info("Payroll entry %s marked %s", entry_id, target.value)
        entry.payment_status = target
        if payment_date is not None:
            entry.payment_date = payment_date
        return entry
