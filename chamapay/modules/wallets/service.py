"""Wallet domain service"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.db.models import Wallet as WalletModel, WalletTransaction as WalletTransactionModel
from chamapay.infrastructure.database.repositories.wallet_repository import SqlWalletRepository

from .exceptions import InsufficientFundsError
from .models import WalletSnapshot, WalletTransactionRecord
from .repository import WalletRepository

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "KES"


@dataclass(slots=True)
class WalletService:
    repository: WalletRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "WalletService":
        return cls(SqlWalletRepository(session))

    async def ensure_wallet(self, account_id: str, currency: str = DEFAULT_CURRENCY) -> WalletSnapshot:
        return self._to_snapshot(await self._get_or_create(account_id, currency))

    async def credit(
        self,
        *,
        account_id: str,
        amount_cents: int,
        type: str,
        currency: str = DEFAULT_CURRENCY,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        payment_method: Optional[str] = None,
        counterparty_id: Optional[str] = None,
    ) -> WalletSnapshot:
        if amount_cents <= 0:
            raise ValueError("Credit amount must be positive")
        previous = await self._get_or_create(account_id, currency)
        previous_balance = previous.balance_cents
        wallet = await self.repository.update_balance(account_id, amount_cents)
        await self.repository.add_transaction(
            account_id=account_id,
            amount_cents=amount_cents,
            currency=currency,
            type=type,
            description=description,
            reference=reference,
            payment_method=payment_method,
            counterparty_id=counterparty_id,
        )
        logger.info(
            "Wallet %s credited %s (%s): %s -> %s",
            account_id,
            amount_cents,
            type,
            previous_balance,
            wallet.balance_cents,
        )
        return self._to_snapshot(wallet)

    async def debit(
        self,
        *,
        account_id: str,
        amount_cents: int,
        type: str,
        currency: str = DEFAULT_CURRENCY,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        counterparty_id: Optional[str] = None,
    ) -> WalletSnapshot:
        if amount_cents <= 0:
            raise ValueError("Debit amount must be positive")
        current = await self._get_or_create(account_id, currency)
        wallet = await self.repository.withdraw_if_sufficient(account_id, amount_cents)
        if wallet is None:
            raise InsufficientFundsError(account_id, current.balance_cents, amount_cents)
        await self.repository.add_transaction(
            account_id=account_id,
            amount_cents=-amount_cents,
            currency=currency,
            type=type,
            description=description,
            reference=reference,
            counterparty_id=counterparty_id,
        )
        logger.info("Wallet %s debited %s (%s), balance %s", account_id, amount_cents, type, wallet.balance_cents)
        return self._to_snapshot(wallet)

    async def set_balance(
        self,
        *,
        account_id: str,
        balance_cents: int,
        currency: str = DEFAULT_CURRENCY,
        description: Optional[str] = None,
    ) -> WalletSnapshot:
        current = await self._get_or_create(account_id, currency)
        previous_balance = current.balance_cents
        wallet = await self.repository.set_balance(account_id, balance_cents)
        delta = balance_cents - previous_balance
        if delta:
            await self.repository.add_transaction(
                account_id=account_id,
                amount_cents=delta,
                currency=currency,
                type="sync",
                description=description,
            )
        logger.info("Wallet %s balance set: %s -> %s", account_id, previous_balance, balance_cents)
        return self._to_snapshot(wallet)

    async def list_transactions(self, account_id: str, limit: int = 20, offset: int = 0) -> list[WalletTransactionRecord]:
        rows = await self.repository.list_transactions(account_id, limit, offset)
        return [self._to_transaction(row) for row in rows]

    async def _get_or_create(self, account_id: str, currency: str) -> WalletModel:
        wallet = await self.repository.get_wallet(account_id)
        if wallet is None:
            wallet = await self.repository.create_wallet(account_id, currency)
        return wallet

    @staticmethod
    def _to_snapshot(model: WalletModel) -> WalletSnapshot:
        return WalletSnapshot(
            account_id=model.account_id,
            balance_cents=model.balance_cents,
            currency=model.currency,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_transaction(model: WalletTransactionModel) -> WalletTransactionRecord:
        return WalletTransactionRecord(
            id=model.id,
            account_id=model.account_id,
            amount_cents=model.amount_cents,
            currency=model.currency,
            type=model.type,
            status=model.status,
            description=model.description,
            reference=model.reference,
            payment_method=model.payment_method,
            counterparty_id=model.counterparty_id,
            created_at=model.created_at,
        )
