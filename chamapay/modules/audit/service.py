"""Append-only audit log service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.infrastructure.database.repositories.audit_repository import SqlAuditRepository


@dataclass(slots=True)
class AuditService:
    repository: SqlAuditRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AuditService":
        return cls(SqlAuditRepository(session))

    async def record(
        self,
        *,
        action: str,
        resource_type: str,
        account_id: Optional[str] = None,
        resource_id: Optional[str] = None,
        new_values: Optional[dict[str, Any]] = None,
    ) -> int:
        entry = await self.repository.add(
            account_id=account_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            new_values=new_values,
        )
        return entry.id
