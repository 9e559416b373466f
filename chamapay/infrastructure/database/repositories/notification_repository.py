"""SQLAlchemy implementation for notifications"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.db.models import ChamaNotification


class SqlNotificationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(
        self,
        *,
        account_id: str,
        chama_id: str | None,
        type: str,
        title: str,
        message: str,
        data: dict[str, Any] | None,
    ) -> ChamaNotification:
        notification = ChamaNotification(
            account_id=account_id,
            chama_id=chama_id,
            type=type,
            title=title,
            message=message,
            data=data,
            is_read=False,
        )
        self.session.add(notification)
        await self.session.flush()
        await self.session.refresh(notification)
        return notification

    async def list_for_account(
        self, account_id: str, *, unread_only: bool, limit: int, offset: int
    ) -> Sequence[ChamaNotification]:
        stmt = select(ChamaNotification).where(ChamaNotification.account_id == account_id)
        if unread_only:
            stmt = stmt.where(ChamaNotification.is_read.is_(False))
        stmt = stmt.order_by(desc(ChamaNotification.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def mark_read(self, notification_id: str, account_id: str) -> ChamaNotification | None:
        stmt = select(ChamaNotification).where(
            ChamaNotification.id == notification_id,
            ChamaNotification.account_id == account_id,
        )
        result = await self.session.execute(stmt)
        notification = result.scalars().first()
        if notification is None:
            return None
        notification.is_read = True
        await self.session.flush()
        await self.session.refresh(notification)
        return notification
