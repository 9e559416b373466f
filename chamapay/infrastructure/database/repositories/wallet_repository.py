"""SQLAlchemy implementation for wallet domain"""

from __future__ import annotations

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.db.models import Wallet, WalletTransaction


class SqlWalletRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_wallet(self, account_id: str) -> Wallet | None:
        stmt = (
            select(Wallet)
            .where(Wallet.account_id == account_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create_wallet(self, account_id: str, currency: str) -> Wallet:
        wallet = Wallet(account_id=account_id, currency=currency, balance_cents=0)
        self.session.add(wallet)
        await self.session.flush()
        await self.session.refresh(wallet)
        return wallet

    async def update_balance(self, account_id: str, delta_cents: int) -> Wallet | None:
        stmt = (
            update(Wallet)
            .where(Wallet.account_id == account_id)
            .values(balance_cents=Wallet.balance_cents + delta_cents)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        return await self.get_wallet(account_id)

    async def withdraw_if_sufficient(self, account_id: str, amount_cents: int) -> Wallet | None:
        """Debit atomically; returns None when the balance does not cover the amount."""
        stmt = (
            update(Wallet)
            .where(Wallet.account_id == account_id, Wallet.balance_cents >= amount_cents)
            .values(balance_cents=Wallet.balance_cents - amount_cents)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get_wallet(account_id)

    async def set_balance(self, account_id: str, balance_cents: int) -> Wallet | None:
        stmt = (
            update(Wallet)
            .where(Wallet.account_id == account_id)
            .values(balance_cents=balance_cents)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        return await self.get_wallet(account_id)

    async def add_transaction(
        self,
        *,
        account_id: str,
        amount_cents: int,
        currency: str,
        type: str,
        description: str | None,
        status: str = "completed",
        reference: str | None = None,
        payment_method: str | None = None,
        counterparty_id: str | None = None,
    ) -> WalletTransaction:
        tx = WalletTransaction(
            account_id=account_id,
            amount_cents=amount_cents,
            currency=currency,
            type=type,
            status=status,
            description=description,
            reference=reference,
            payment_method=payment_method,
            counterparty_id=counterparty_id,
        )
        self.session.add(tx)
        await self.session.flush()
        await self.session.refresh(tx)
        return tx

    async def list_transactions(self, account_id: str, limit: int, offset: int) -> list[WalletTransaction]:
        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.account_id == account_id)
            .order_by(desc(WalletTransaction.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
