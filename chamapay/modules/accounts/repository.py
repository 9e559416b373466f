"""Repository protocol for accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from chamapay.db.models import Account as AccountModel


class AccountRepository(Protocol):
    """Abstract repository interface for account persistence."""

    async def get_by_id(self, account_id: str) -> AccountModel | None:
        ...

    async def get_by_username(self, username: str) -> AccountModel | None:
        ...

    async def get_by_email(self, email: str) -> AccountModel | None:
        ...

    async def create_account(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        role: str,
        full_name: str | None,
        is_active: bool,
    ) -> AccountModel:
        ...

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        ...
