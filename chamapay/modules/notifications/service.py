"""Domain service for user notifications."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.db.models import ChamaNotification as NotificationModel
from chamapay.infrastructure.database.repositories.notification_repository import SqlNotificationRepository

from .models import Notification
from .repository import NotificationRepository


@dataclass(slots=True)
class NotificationService:
    repository: NotificationRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "NotificationService":
        return cls(SqlNotificationRepository(session))

    async def notify(
        self,
        *,
        account_id: str,
        type: str,
        title: str,
        message: str,
        chama_id: Optional[str] = None,
        data: Optional[dict[str, Any]] = None,
    ) -> Notification:
        model = await self.repository.add(
            account_id=account_id,
            chama_id=chama_id,
            type=type,
            title=title,
            message=message,
            data=data,
        )
        return self._to_domain(model)

    async def list_notifications(
        self,
        account_id: str,
        *,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Notification]:
        rows = await self.repository.list_for_account(
            account_id, unread_only=unread_only, limit=limit, offset=offset
        )
        return [self._to_domain(row) for row in rows]

    async def mark_read(self, notification_id: str, account_id: str) -> Notification | None:
        model = await self.repository.mark_read(notification_id, account_id)
        return self._to_domain(model) if model else None

    @staticmethod
    def _to_domain(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            account_id=model.account_id,
            chama_id=model.chama_id,
            type=model.type,
            title=model.title,
            message=model.message,
            data=model.data,
            is_read=bool(model.is_read),
            created_at=model.created_at,
        )
