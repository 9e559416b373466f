"""
Seed the platform administrator.

Creates the first admin account (and its wallet) so chamas can be listed and the
Paystack balance synced.
"""
import asyncio
import os

from sqlalchemy import select

from chamapay.db.models import Account
from chamapay.infrastructure.database import dispose_engine, get_session, init_db
from chamapay.modules.accounts import AccountCreateInput, AccountService
from chamapay.modules.wallets import WalletService


async def create_default_admin():
    """Create the default admin account when none exists."""
    await init_db()

    async for db in get_session():
        stmt = select(Account).where(Account.role == "admin").limit(1)
        result = await db.execute(stmt)
        if result.scalar_one_or_none():
            print("An admin account already exists, nothing to do")
            return

        username = os.environ.get("CHAMAPAY_ADMIN_USERNAME", "admin")
        email = os.environ.get("CHAMAPAY_ADMIN_EMAIL", "admin@example.com")
        password = os.environ.get("CHAMAPAY_ADMIN_PASSWORD", "admin123")

        account = await AccountService.with_session(db).create_account(
            AccountCreateInput(
                username=username,
                email=email,
                password=password,
                role="admin",
                full_name="Platform Admin",
            )
        )
        await WalletService.with_session(db).ensure_wallet(account.id)
        await db.commit()

        print("=" * 50)
        print("Admin account created")
        print("=" * 50)
        print(f"Username: {username}")
        print(f"Email: {email}")
        print("=" * 50)
        print("Change the password after the first login!")
        print("=" * 50)


async def main():
    try:
        await create_default_admin()
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
