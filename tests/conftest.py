"""
Pytest configuration and fixtures for the chama payments API.
"""

import json
from typing import Any, AsyncGenerator, Callable, Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from chamapay.core.config import PaystackSettings
from chamapay.core.security import create_access_token
from chamapay.infrastructure.database import Base
from chamapay.infrastructure.paystack import PaystackClient
from chamapay.interfaces.http.deps import get_db_session, get_paystack_client
from chamapay.main import create_app
from chamapay.modules.accounts import Account, AccountCreateInput, AccountService
from chamapay.modules.wallets import WalletService

import chamapay.db.models  # noqa: F401

PAYSTACK_SECRET = "sk_test_chamapay"


class FakePaystack:
    """In-process stand-in for the Paystack REST API."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.balance: list[dict[str, Any]] = [{"currency": "KES", "balance": 1_234_500}]
        self.fail_with: Optional[int] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"status": False, "message": "Invalid key"})
        if request.url.path == "/transaction/initialize":
            payload = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "status": True,
                    "message": "Authorization URL created",
                    "data": {
                        "authorization_url": f"https://checkout.paystack.com/{payload['reference']}",
                        "access_code": "ac_test",
                        "reference": payload["reference"],
                    },
                },
            )
        if request.url.path == "/balance":
            return httpx.Response(200, json={"status": True, "message": "Balances retrieved", "data": self.balance})
        return httpx.Response(404, json={"status": False, "message": "Not found"})

    def last_json(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'chamapay-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def paystack_settings() -> PaystackSettings:
    return PaystackSettings(secret_key=PAYSTACK_SECRET, currency="KES")


@pytest.fixture
def fake_paystack() -> FakePaystack:
    return FakePaystack()


@pytest.fixture
def paystack_client(paystack_settings, fake_paystack) -> PaystackClient:
    return PaystackClient(paystack_settings, transport=httpx.MockTransport(fake_paystack.handler))


@pytest.fixture
def make_account(db_session) -> Callable[..., Any]:
    """Create a committed account with a funded wallet."""

    async def _make(
        username: str,
        *,
        email: Optional[str] = None,
        role: str = "user",
        balance_cents: int = 0,
        full_name: Optional[str] = None,
    ) -> Account:
        account = await AccountService.with_session(db_session).create_account(
            AccountCreateInput(
                username=username,
                email=email or f"{username}@example.com",
                password="secret123",
                role=role,
                full_name=full_name,
            )
        )
        wallets = WalletService.with_session(db_session)
        await wallets.ensure_wallet(account.id)
        if balance_cents:
            await wallets.set_balance(account_id=account.id, balance_cents=balance_cents, description="Opening balance")
        await db_session.commit()
        return account

    return _make


def auth_headers(account: Account) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(account.id, account.username, account.role)}"}


@pytest.fixture
def app(session_factory, paystack_client):
    application = create_app()

    async def _override_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = _override_db
    application.dependency_overrides[get_paystack_client] = lambda: paystack_client
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
