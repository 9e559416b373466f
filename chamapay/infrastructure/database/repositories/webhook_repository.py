"""SQLAlchemy implementation for the Paystack webhook log"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.db.models import PaystackWebhook


class SqlWebhookLogRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        event_type: str,
        reference: str | None,
        amount_cents: int | None,
        channel: str | None,
        customer_email: str | None,
        payload: dict[str, Any],
    ) -> PaystackWebhook:
        entry = PaystackWebhook(
            event_type=event_type,
            reference=reference,
            amount_cents=amount_cents,
            channel=channel,
            customer_email=customer_email,
            payload=payload,
            status="processing",
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def finish(self, entry_id: str, *, status: str, error_message: str | None = None) -> None:
        stmt = (
            update(PaystackWebhook)
            .where(PaystackWebhook.id == entry_id)
            .values(
                status=status,
                error_message=error_message,
                processed_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
