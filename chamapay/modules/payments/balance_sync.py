"""Mirror the Paystack integration balance into a wallet."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.infrastructure.paystack import PaystackClient
from chamapay.modules.audit import AuditService
from chamapay.modules.wallets import WalletService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BalanceSyncResult:
    account_id: str
    balance_cents: int
    currency: str
    synced_at: datetime


@dataclass(slots=True)
class BalanceSyncService:
    paystack: PaystackClient
    wallets: WalletService
    audit: AuditService

    @classmethod
    def with_session(cls, session: AsyncSession, paystack: PaystackClient) -> "BalanceSyncService":
        return cls(paystack, WalletService.with_session(session), AuditService.with_session(session))

    async def sync(self, account_id: str, *, performed_by: str | None = None) -> BalanceSyncResult:
        balance = await self.paystack.fetch_balance()
        await self.wallets.set_balance(
            account_id=account_id,
            balance_cents=balance.balance_cents,
            description="Paystack balance sync",
        )
        await self.audit.record(
            account_id=performed_by or account_id,
            action="paystack_balance_sync",
            resource_type="wallet",
            resource_id=account_id,
            new_values={"balance_cents": balance.balance_cents, "currency": balance.currency},
        )
        logger.info("Wallet %s synced to Paystack balance %s %s", account_id, balance.balance_cents, balance.currency)
        return BalanceSyncResult(
            account_id=account_id,
            balance_cents=balance.balance_cents,
            currency=balance.currency,
            synced_at=datetime.now(timezone.utc),
        )
