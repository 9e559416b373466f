"""SQLAlchemy implementation for the audit log"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.db.models import AuditLog


class SqlAuditRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(
        self,
        *,
        account_id: str | None,
        action: str,
        resource_type: str,
        resource_id: str | None,
        new_values: dict[str, Any] | None,
    ) -> AuditLog:
        entry = AuditLog(
            account_id=account_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            new_values=new_values,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry
