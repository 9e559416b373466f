"""SQLAlchemy implementation for chamas, members and purchases"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from chamapay.db.models import Chama, ChamaMember, PendingChamaPurchase


class SqlChamaRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_chama(
        self,
        *,
        name: str,
        description: str | None,
        max_members: int,
        sale_price_cents: int,
    ) -> Chama:
        chama = Chama(
            name=name,
            description=description,
            max_members=max_members,
            sale_price_cents=sale_price_cents,
            total_savings_cents=0,
        )
        self.session.add(chama)
        await self.session.flush()
        await self.session.refresh(chama)
        return chama

    async def get_chama(self, chama_id: str) -> Chama | None:
        stmt = select(Chama).where(Chama.id == chama_id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_chamas(self, *, available_only: bool, limit: int, offset: int) -> Sequence[Chama]:
        stmt = select(Chama)
        if available_only:
            stmt = stmt.where(Chama.purchased_by.is_(None))
        stmt = stmt.order_by(desc(Chama.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def update_chama(self, chama_id: str, **values: Any) -> None:
        stmt = (
            update(Chama)
            .where(Chama.id == chama_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def claim_chama(self, chama_id: str, buyer_id: str, **values: Any) -> bool:
        """Set the owner only while the chama is unowned; False when someone got there first."""
        stmt = (
            update(Chama)
            .where(Chama.id == chama_id, Chama.purchased_by.is_(None))
            .values(purchased_by=buyer_id, **values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def get_member(self, chama_id: str, account_id: str) -> ChamaMember | None:
        stmt = select(ChamaMember).where(
            ChamaMember.chama_id == chama_id,
            ChamaMember.account_id == account_id,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add_member(self, *, chama_id: str, account_id: str, role: str) -> ChamaMember:
        member = ChamaMember(chama_id=chama_id, account_id=account_id, role=role, is_active=True)
        self.session.add(member)
        await self.session.flush()
        await self.session.refresh(member)
        return member

    async def list_members(self, chama_id: str) -> Sequence[ChamaMember]:
        stmt = select(ChamaMember).where(ChamaMember.chama_id == chama_id).order_by(ChamaMember.joined_at)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def create_purchase(self, *, chama_id: str, buyer_id: str, expected_amount_cents: int) -> PendingChamaPurchase:
        purchase = PendingChamaPurchase(
            chama_id=chama_id,
            buyer_id=buyer_id,
            expected_amount_cents=expected_amount_cents,
            payment_status="pending",
            ownership_granted=False,
        )
        self.session.add(purchase)
        await self.session.flush()
        return await self._get_purchase(purchase.id)

    async def get_pending_purchase(self, chama_id: str, buyer_id: str) -> PendingChamaPurchase | None:
        stmt = (
            select(PendingChamaPurchase)
            .options(selectinload(PendingChamaPurchase.chama))
            .where(
                PendingChamaPurchase.chama_id == chama_id,
                PendingChamaPurchase.buyer_id == buyer_id,
                PendingChamaPurchase.payment_status == "pending",
            )
            .order_by(desc(PendingChamaPurchase.created_at))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def update_purchase(self, purchase_id: str, **values: Any) -> None:
        stmt = (
            update(PendingChamaPurchase)
            .where(PendingChamaPurchase.id == purchase_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def fail_pending_purchases(self, chama_id: str, *, exclude_id: str, meta: dict[str, Any]) -> int:
        stmt = (
            update(PendingChamaPurchase)
            .where(
                PendingChamaPurchase.chama_id == chama_id,
                PendingChamaPurchase.id != exclude_id,
                PendingChamaPurchase.payment_status == "pending",
            )
            .values(payment_status="failed", meta=meta)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def _get_purchase(self, purchase_id: str) -> PendingChamaPurchase:
        stmt = (
            select(PendingChamaPurchase)
            .options(selectinload(PendingChamaPurchase.chama))
            .where(PendingChamaPurchase.id == purchase_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().one()
