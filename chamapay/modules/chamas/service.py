"""Chama listing, membership and purchase service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.db.models import (
    Chama as ChamaModel,
    ChamaMember as ChamaMemberModel,
    PendingChamaPurchase as PurchaseModel,
)
from chamapay.infrastructure.database.repositories.chama_repository import SqlChamaRepository
from chamapay.modules.accounts import Account
from chamapay.modules.payments import PURPOSE_CHAMA_PURCHASE, CheckoutSession, PaymentService

from .exceptions import ChamaNotFoundError, ChamaUnavailableError
from .models import ALREADY_PURCHASED, Chama, ChamaMember, ChamaPurchase
from .repository import ChamaRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ChamaService:
    repository: ChamaRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "ChamaService":
        return cls(SqlChamaRepository(session))

    async def create_chama(
        self,
        *,
        name: str,
        sale_price_cents: int,
        max_members: int = 50,
        description: Optional[str] = None,
    ) -> Chama:
        if sale_price_cents <= 0:
            raise ValueError("Sale price must be greater than 0")
        if max_members < 1:
            raise ValueError("A chama needs room for at least one member")
        model = await self.repository.create_chama(
            name=name.strip(),
            description=description,
            max_members=max_members,
            sale_price_cents=sale_price_cents,
        )
        return self._to_chama(model)

    async def get_chama(self, chama_id: str) -> Chama:
        model = await self.repository.get_chama(chama_id)
        if model is None:
            raise ChamaNotFoundError(chama_id)
        return self._to_chama(model)

    async def list_chamas(self, *, available_only: bool = False, limit: int = 50, offset: int = 0) -> list[Chama]:
        rows = await self.repository.list_chamas(available_only=available_only, limit=limit, offset=offset)
        return [self._to_chama(row) for row in rows]

    async def list_members(self, chama_id: str) -> list[ChamaMember]:
        await self.get_chama(chama_id)
        rows = await self.repository.list_members(chama_id)
        return [self._to_member(row) for row in rows]

    async def start_purchase(
        self,
        *,
        chama_id: str,
        buyer: Account,
        email: str,
        payments: PaymentService,
    ) -> tuple[ChamaPurchase, CheckoutSession]:
        chama = await self.get_chama(chama_id)
        if chama.is_purchased:
            raise ChamaUnavailableError(f"{chama.name} has already been purchased")

        purchase = await self.repository.get_pending_purchase(chama_id, buyer.id)
        if purchase is None:
            purchase = await self.repository.create_purchase(
                chama_id=chama_id,
                buyer_id=buyer.id,
                expected_amount_cents=chama.sale_price_cents,
            )
        checkout = await payments.initialize_payment(
            account=buyer,
            email=email,
            amount_cents=purchase.expected_amount_cents,
            purpose=PURPOSE_CHAMA_PURCHASE,
            chama_id=chama_id,
            description=f"Purchase of {chama.name}",
            metadata={"purchase_id": purchase.id},
        )
        return self._to_purchase(purchase), checkout

    async def find_pending_purchase(self, chama_id: str, buyer_id: str) -> ChamaPurchase | None:
        model = await self.repository.get_pending_purchase(chama_id, buyer_id)
        return self._to_purchase(model) if model else None

    async def grant_ownership(
        self,
        purchase: ChamaPurchase,
        *,
        amount_paid_cents: int,
        paid_at: Optional[str],
        reference: str,
    ) -> bool:
        """Make the buyer owner and admin; False when another buyer already owns the chama."""
        claimed = await self.repository.claim_chama(
            purchase.chama_id,
            purchase.buyer_id,
            purchased_at=paid_at,
            purchase_amount_cents=amount_paid_cents,
            total_savings_cents=0,
        )
        if not claimed:
            logger.warning("Chama %s already has an owner, purchase %s loses", purchase.chama_id, purchase.id)
            return False

        existing = await self.repository.get_member(purchase.chama_id, purchase.buyer_id)
        if existing is None:
            await self.repository.add_member(
                chama_id=purchase.chama_id,
                account_id=purchase.buyer_id,
                role="admin",
            )
        else:
            logger.warning("Buyer %s is already a member of chama %s", purchase.buyer_id, purchase.chama_id)
        await self.repository.update_purchase(
            purchase.id,
            payment_status="verified",
            amount_paid_cents=amount_paid_cents,
            payment_verified_at=paid_at,
            ownership_granted=True,
            paystack_reference=reference,
        )
        closed = await self.repository.fail_pending_purchases(
            purchase.chama_id,
            exclude_id=purchase.id,
            meta={"error": ALREADY_PURCHASED},
        )
        if closed:
            logger.info("Closed %s competing purchases of chama %s", closed, purchase.chama_id)
        logger.info("Chama %s ownership granted to %s", purchase.chama_id, purchase.buyer_id)
        return True

    async def fail_purchase(
        self,
        purchase: ChamaPurchase,
        *,
        amount_paid_cents: int,
        reason: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        await self.repository.update_purchase(
            purchase.id,
            payment_status="failed",
            amount_paid_cents=amount_paid_cents,
            meta={"error": reason, **(details or {})},
        )
        logger.warning("Chama purchase %s failed: %s", purchase.id, reason)

    @staticmethod
    def _to_chama(model: ChamaModel) -> Chama:
        return Chama(
            id=model.id,
            name=model.name,
            description=model.description,
            max_members=model.max_members,
            sale_price_cents=model.sale_price_cents,
            total_savings_cents=model.total_savings_cents,
            purchased_by=model.purchased_by,
            purchased_at=model.purchased_at,
            purchase_amount_cents=model.purchase_amount_cents,
            created_at=model.created_at,
        )

    @staticmethod
    def _to_member(model: ChamaMemberModel) -> ChamaMember:
        return ChamaMember(
            id=model.id,
            chama_id=model.chama_id,
            account_id=model.account_id,
            role=model.role,
            is_active=bool(model.is_active),
            joined_at=model.joined_at,
        )

    @staticmethod
    def _to_purchase(model: PurchaseModel) -> ChamaPurchase:
        return ChamaPurchase(
            id=model.id,
            chama_id=model.chama_id,
            chama_name=model.chama.name if model.chama is not None else None,
            buyer_id=model.buyer_id,
            expected_amount_cents=model.expected_amount_cents,
            amount_paid_cents=model.amount_paid_cents,
            payment_status=model.payment_status,
            ownership_granted=bool(model.ownership_granted),
            paystack_reference=model.paystack_reference,
            meta=model.meta,
            created_at=model.created_at,
        )
