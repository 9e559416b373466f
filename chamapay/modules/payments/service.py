"""Payment checkout and status service."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.db.models import PaymentTransaction as PaymentTransactionModel
from chamapay.infrastructure.database.repositories.payment_repository import SqlPaymentTransactionRepository
from chamapay.infrastructure.paystack import PaystackClient
from chamapay.modules.accounts import Account

from .exceptions import PaymentNotFoundError, PaymentValidationError
from .models import PAYMENT_PURPOSES, CheckoutSession, PaymentRecord
from .repository import PaymentTransactionRepository

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "CHP"


def generate_reference(prefix: str = REFERENCE_PREFIX) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:24].upper()}"


@dataclass(slots=True)
class PaymentService:
    repository: PaymentTransactionRepository
    paystack: PaystackClient

    @classmethod
    def with_session(cls, session: AsyncSession, paystack: PaystackClient) -> "PaymentService":
        return cls(SqlPaymentTransactionRepository(session), paystack)

    @property
    def currency(self) -> str:
        return self.paystack.settings.currency

    async def initialize_payment(
        self,
        *,
        account: Account,
        email: str,
        amount_cents: int,
        purpose: str,
        description: Optional[str] = None,
        phone_number: Optional[str] = None,
        payment_method: Optional[str] = None,
        chama_id: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
        channels: Optional[Iterable[str]] = None,
    ) -> CheckoutSession:
        if amount_cents <= 0:
            raise PaymentValidationError("Amount must be greater than 0")
        if purpose not in PAYMENT_PURPOSES:
            raise PaymentValidationError(f"Unsupported payment purpose: {purpose}")
        if not email:
            raise PaymentValidationError("Email is required for payment")

        reference = generate_reference()
        meta: dict[str, Any] = {key: value for key, value in (metadata or {}).items() if value is not None}
        meta.update({"purpose": purpose, "account_id": account.id})
        if chama_id:
            meta["chama_id"] = chama_id
        if description:
            meta["description"] = description
        if phone_number:
            meta["phone_number"] = phone_number

        checkout = await self.paystack.initialize_transaction(
            email=email,
            amount_cents=amount_cents,
            reference=reference,
            currency=self.currency,
            channels=channels,
            metadata=meta,
        )
        await self.repository.create(
            account_id=account.id,
            reference=checkout.reference,
            purpose=purpose,
            amount_cents=amount_cents,
            currency=self.currency,
            chama_id=chama_id,
            payment_method=payment_method,
            phone_number=phone_number,
            meta=meta,
        )
        logger.info(
            "Checkout %s initialised for account %s: %s %s (%s)",
            checkout.reference,
            account.id,
            amount_cents,
            self.currency,
            purpose,
        )
        return CheckoutSession(
            reference=checkout.reference,
            authorization_url=checkout.authorization_url,
            access_code=checkout.access_code,
            amount_cents=amount_cents,
            currency=self.currency,
            purpose=purpose,
        )

    async def get_status(self, reference: str, account_id: str) -> PaymentRecord:
        model = await self.repository.get_by_reference(reference)
        if model is None or model.account_id != account_id:
            raise PaymentNotFoundError(reference)
        return to_payment_record(model)


def to_payment_record(model: PaymentTransactionModel) -> PaymentRecord:
    return PaymentRecord(
        id=model.id,
        account_id=model.account_id,
        reference=model.reference,
        purpose=model.purpose,
        chama_id=model.chama_id,
        amount_cents=model.amount_cents,
        currency=model.currency,
        payment_method=model.payment_method,
        status=model.status,
        result_code=model.result_code,
        result_desc=model.result_desc,
        receipt_number=model.receipt_number,
        transaction_date=model.transaction_date,
        meta=model.meta,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
