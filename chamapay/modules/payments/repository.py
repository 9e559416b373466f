"""Repository protocol for payment transactions."""

from __future__ import annotations

from typing import Any, Iterable, Protocol

from chamapay.db.models import PaymentTransaction as PaymentTransactionModel


class PaymentTransactionRepository(Protocol):
    async def create(
        self,
        *,
        account_id: str,
        reference: str,
        purpose: str,
        amount_cents: int,
        currency: str,
        chama_id: str | None,
        payment_method: str | None,
        phone_number: str | None,
        meta: dict[str, Any] | None,
    ) -> PaymentTransactionModel:
        ...

    async def get_by_reference(self, reference: str) -> PaymentTransactionModel | None:
        ...

    async def transition(self, reference: str, from_statuses: Iterable[str], **values: Any) -> bool:
        ...
