"""Repository protocol for chamas."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from chamapay.db.models import (
    Chama as ChamaModel,
    ChamaMember as ChamaMemberModel,
    PendingChamaPurchase as PurchaseModel,
)


class ChamaRepository(Protocol):
    async def create_chama(
        self,
        *,
        name: str,
        description: str | None,
        max_members: int,
        sale_price_cents: int,
    ) -> ChamaModel:
        ...

    async def get_chama(self, chama_id: str) -> ChamaModel | None:
        ...

    async def list_chamas(self, *, available_only: bool, limit: int, offset: int) -> Sequence[ChamaModel]:
        ...

    async def update_chama(self, chama_id: str, **values: Any) -> None:
        ...

    async def claim_chama(self, chama_id: str, buyer_id: str, **values: Any) -> bool:
        ...

    async def get_member(self, chama_id: str, account_id: str) -> ChamaMemberModel | None:
        ...

    async def add_member(self, *, chama_id: str, account_id: str, role: str) -> ChamaMemberModel:
        ...

    async def list_members(self, chama_id: str) -> Sequence[ChamaMemberModel]:
        ...

    async def create_purchase(self, *, chama_id: str, buyer_id: str, expected_amount_cents: int) -> PurchaseModel:
        ...

    async def get_pending_purchase(self, chama_id: str, buyer_id: str) -> PurchaseModel | None:
        ...

    async def update_purchase(self, purchase_id: str, **values: Any) -> None:
        ...

    async def fail_pending_purchases(self, chama_id: str, *, exclude_id: str, meta: dict[str, Any]) -> int:
        ...
