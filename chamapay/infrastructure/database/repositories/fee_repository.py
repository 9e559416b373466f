"""SQLAlchemy implementation for platform fees"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.db.models import PlatformFee


class SqlFeeRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, fee_type: str, payment_reference: str) -> PlatformFee | None:
        stmt = select(PlatformFee).where(
            PlatformFee.fee_type == fee_type,
            PlatformFee.payment_reference == payment_reference,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add(
        self,
        *,
        account_id: str,
        fee_type: str,
        amount_cents: int,
        source_transaction_id: str | None,
        payment_reference: str,
    ) -> PlatformFee:
        fee = PlatformFee(
            account_id=account_id,
            fee_type=fee_type,
            amount_cents=amount_cents,
            source_transaction_id=source_transaction_id,
            payment_reference=payment_reference,
        )
        self.session.add(fee)
        await self.session.flush()
        return fee
