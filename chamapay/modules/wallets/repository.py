"""Repository protocol for wallet operations."""

from __future__ import annotations

from typing import Protocol, Sequence

from chamapay.db.models import Wallet as WalletModel, WalletTransaction as WalletTransactionModel


class WalletRepository(Protocol):
    async def get_wallet(self, account_id: str) -> WalletModel | None:
        ...

    async def create_wallet(self, account_id: str, currency: str) -> WalletModel:
        ...

    async def update_balance(self, account_id: str, delta_cents: int) -> WalletModel | None:
        ...

    async def withdraw_if_sufficient(self, account_id: str, amount_cents: int) -> WalletModel | None:
        ...

    async def set_balance(self, account_id: str, balance_cents: int) -> WalletModel | None:
        ...

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
    ) -> WalletTransactionModel:
        ...

    async def list_transactions(self, account_id: str, limit: int, offset: int) -> Sequence[WalletTransactionModel]:
        ...
