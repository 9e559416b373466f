"""SQLAlchemy implementation for payment transactions"""

from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.db.models import PaymentTransaction


class SqlPaymentTransactionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        account_id: str,
        reference: str,
        purpose: str,
        amount_cents: int,
        currency: str,
        chama_id: str | None,
        payment_method: str | None,
        phone_number: str | None,
        meta: dict[str, Any] | None,
    ) -> PaymentTransaction:
        tx = PaymentTransaction(
            account_id=account_id,
            reference=reference,
            purpose=purpose,
            amount_cents=amount_cents,
            currency=currency,
            chama_id=chama_id,
            payment_method=payment_method,
            phone_number=phone_number,
            status="pending",
            meta=meta,
        )
        self.session.add(tx)
        await self.session.flush()
        await self.session.refresh(tx)
        return tx

    async def get_by_reference(self, reference: str) -> PaymentTransaction | None:
        stmt = (
            select(PaymentTransaction)
            .where(PaymentTransaction.reference == reference)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def transition(self, reference: str, from_statuses: Iterable[str], **values: Any) -> bool:
        """Move a transaction out of one of ``from_statuses``.

        Returns False when the row is missing or in any other state, which makes the
        status transition the idempotency guard for webhook replays.
        """
        stmt = (
            update(PaymentTransaction)
            .where(
                PaymentTransaction.reference == reference,
                PaymentTransaction.status.in_(tuple(from_statuses)),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
