"""Domain services for account management."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.core.crypto import hash_password, verify_password
from chamapay.db.models import Account as AccountModel
from chamapay.infrastructure.database.repositories.account_repository import SqlAccountRepository

from .exceptions import AccountAlreadyExistsError
from .models import Account, AccountCreateInput
from .repository import AccountRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountService:
    """Encapsulates core account use cases."""

    def __init__(self, repository: AccountRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AccountService":
        return cls(SqlAccountRepository(session))

    async def get_by_id(self, account_id: str) -> Account | None:
        return self._to_domain(await self._repository.get_by_id(account_id))

    async def find_by_email(self, email: str) -> Account | None:
        return self._to_domain(await self._repository.get_by_email(normalize_email(email)))

    async def authenticate(self, login: str, password: str) -> Account | None:
        login = login.strip()
        if "@" in login:
            account = await self.find_by_email(login)
        else:
            account = self._to_domain(await self._repository.get_by_username(login))
        if account is None or not account.is_active:
            return None
        if not verify_password(password, account.password_hash):
            return None
        return account

    async def create_account(self, payload: AccountCreateInput) -> Account:
        email = normalize_email(payload.email)
        if await self._repository.get_by_username(payload.username) is not None:
            raise AccountAlreadyExistsError(f"Username already taken: {payload.username}")
        if await self._repository.get_by_email(email) is not None:
            raise AccountAlreadyExistsError(f"Email already registered: {email}")

        model = await self._repository.create_account(
            username=payload.username,
            email=email,
            password_hash=hash_password(payload.password),
            role=payload.role,
            full_name=payload.full_name,
            is_active=payload.is_active,
        )
        return self._to_domain(model)

    async def set_last_login(self, account_id: str) -> None:
        await self._repository.set_last_login(account_id, datetime.now(timezone.utc))

    @staticmethod
    def _to_domain(model: AccountModel | None) -> Account | None:
        if model is None:
            return None
        return Account(
            id=str(model.id),
            username=model.username,
            email=model.email,
            role=model.role or "user",
            is_active=bool(model.is_active),
            password_hash=model.password_hash,
            full_name=model.full_name,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_login_at=model.last_login_at,
        )
