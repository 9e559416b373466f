"""Platform fee computation and collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.infrastructure.database.repositories.fee_repository import SqlFeeRepository

logger = logging.getLogger(__name__)

FEE_TYPE_TRANSACTION = "transaction"


def compute_platform_fee(amount_cents: int, rate: Decimal) -> int:
    """Fee in minor units, rounded half-up to the nearest cent."""
    fee = (Decimal(amount_cents) * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(fee)


def split_amount(amount_cents: int, rate: Decimal) -> tuple[int, int]:
    """Return ``(fee, net)`` for a gross amount."""
    fee = compute_platform_fee(amount_cents, rate)
    return fee, amount_cents - fee


@dataclass(slots=True)
class FeeService:
    repository: SqlFeeRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "FeeService":
        return cls(SqlFeeRepository(session))

    async def collect(
        self,
        *,
        account_id: str,
        amount_cents: int,
        payment_reference: str,
        source_transaction_id: Optional[str] = None,
        fee_type: str = FEE_TYPE_TRANSACTION,
    ) -> bool:
        """Record a fee once per reference; returns False when it was already collected."""
        existing = await self.repository.get(fee_type, payment_reference)
        if existing is not None:
            logger.info("Platform fee for %s already collected", payment_reference)
            return False
        await self.repository.add(
            account_id=account_id,
            fee_type=fee_type,
            amount_cents=amount_cents,
            source_transaction_id=source_transaction_id,
            payment_reference=payment_reference,
        )
        logger.info("Platform fee collected: %s for %s", amount_cents, payment_reference)
        return True
