"""Repository protocol for notifications."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from chamapay.db.models import ChamaNotification as NotificationModel


class NotificationRepository(Protocol):
    async def add(
        self,
        *,
        account_id: str,
        chama_id: str | None,
        type: str,
        title: str,
        message: str,
        data: dict[str, Any] | None,
    ) -> NotificationModel:
        ...

    async def list_for_account(
        self, account_id: str, *, unread_only: bool, limit: int, offset: int
    ) -> Sequence[NotificationModel]:
        ...

    async def mark_read(self, notification_id: str, account_id: str) -> NotificationModel | None:
        ...
