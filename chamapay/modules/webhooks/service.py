"""Paystack webhook processing.

A verified event runs a fixed sequence of writes inside the request's session:

* ``charge.success``: webhook log, transaction status, chama ownership (purchase
  purpose), wallet credit with ledger row and notification (wallet purposes),
  platform fee, final webhook log status.
* ``charge.failed``: webhook log, transaction status with a user-facing reason,
  failure notification.

The ``pending -> success|failed`` transition is conditional in SQL, so a replayed
event finds nothing to transition and is recorded as a duplicate without touching
balances.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.db.models import PaymentTransaction as PaymentTransactionModel
from chamapay.infrastructure.database.repositories.payment_repository import SqlPaymentTransactionRepository
from chamapay.infrastructure.database.repositories.webhook_repository import SqlWebhookLogRepository
from chamapay.infrastructure.paystack import PaystackClient
from chamapay.modules.chamas import ALREADY_PURCHASED, ChamaNotFoundError, ChamaService
from chamapay.modules.notifications import NotificationService
from chamapay.modules.payments import PURPOSE_CHAMA_PURCHASE, WALLET_CREDIT_PURPOSES, FeeService, split_amount
from chamapay.modules.payments.models import STATUS_FAILED, STATUS_PENDING, STATUS_SUCCESS
from chamapay.modules.payments.repository import PaymentTransactionRepository
from chamapay.modules.wallets import WalletService

from . import messages
from .exceptions import WebhookPayloadError, WebhookSignatureError
from .models import (
    EVENT_CHARGE_FAILED,
    EVENT_CHARGE_SUCCESS,
    LOG_COMPLETED,
    LOG_DUPLICATE,
    LOG_FAILED,
    LOG_IGNORED,
    WebhookOutcome,
)

logger = logging.getLogger(__name__)

# Paystack lets a customer retry a failed attempt on the same checkout, so a
# success may follow a failure for one reference. Nothing ever leaves success.
_SUCCESS_FROM = (STATUS_PENDING, STATUS_FAILED)
_FAILED_FROM = (STATUS_PENDING,)


def _to_cents(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


@dataclass(slots=True)
class PaystackWebhookService:
    paystack: PaystackClient
    payments: PaymentTransactionRepository
    webhook_log: SqlWebhookLogRepository
    wallets: WalletService
    chamas: ChamaService
    notifications: NotificationService
    fees: FeeService
    fee_rate: Decimal

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        paystack: PaystackClient,
        fee_rate: Decimal,
    ) -> "PaystackWebhookService":
        return cls(
            paystack=paystack,
            payments=SqlPaymentTransactionRepository(session),
            webhook_log=SqlWebhookLogRepository(session),
            wallets=WalletService.with_session(session),
            chamas=ChamaService.with_session(session),
            notifications=NotificationService.with_session(session),
            fees=FeeService.with_session(session),
            fee_rate=fee_rate,
        )

    def verify_signature(self, body: bytes, signature: Optional[str]) -> None:
        if not signature:
            if self.paystack.settings.allow_unsigned_webhooks:
                logger.warning("Accepting unsigned webhook (unsigned webhooks allowed)")
                return
            raise WebhookSignatureError("Missing x-paystack-signature header")
        if not self.paystack.verify_signature(body, signature):
            logger.error("Webhook signature mismatch")
            raise WebhookSignatureError("Invalid webhook signature")

    @staticmethod
    def parse_event(body: bytes) -> dict[str, Any]:
        try:
            event = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise WebhookPayloadError("Webhook body is not valid JSON") from exc
        if not isinstance(event, dict) or not isinstance(event.get("event"), str):
            raise WebhookPayloadError("Webhook body has no event type")
        if not isinstance(event.get("data"), dict):
            raise WebhookPayloadError("Webhook body has no data object")
        return event

    async def handle(self, body: bytes, signature: Optional[str]) -> WebhookOutcome:
        self.verify_signature(body, signature)
        event = self.parse_event(body)
        return await self.process_event(event)

    async def process_event(self, event: dict[str, Any]) -> WebhookOutcome:
        event_type = event["event"]
        data = event["data"]
        reference = data.get("reference")
        logger.info("Paystack event %s received for %s", event_type, reference)

        log_entry = await self.webhook_log.create(
            event_type=event_type,
            reference=reference,
            amount_cents=_to_cents(data.get("amount")) if "amount" in data else None,
            channel=data.get("channel"),
            customer_email=(data.get("customer") or {}).get("email"),
            payload=event,
        )

        if event_type == EVENT_CHARGE_SUCCESS:
            outcome = await self._charge_success(event, data)
        elif event_type == EVENT_CHARGE_FAILED:
            outcome = await self._charge_failed(event, data)
        else:
            logger.info("Ignoring Paystack event %s", event_type)
            outcome = WebhookOutcome(event=event_type, reference=reference, status=LOG_IGNORED)

        await self.webhook_log.finish(log_entry.id, status=outcome.status, error_message=outcome.detail)
        return outcome

    async def _lookup(self, event_type: str, reference: Optional[str]) -> PaymentTransactionModel | WebhookOutcome:
        if not reference:
            logger.error("%s without a reference", event_type)
            return WebhookOutcome(event=event_type, reference=None, status=LOG_FAILED, detail="Missing reference")
        transaction = await self.payments.get_by_reference(reference)
        if transaction is None:
            logger.error("No payment transaction for reference %s", reference)
            return WebhookOutcome(
                event=event_type,
                reference=reference,
                status=LOG_FAILED,
                detail="Transaction not found",
            )
        logger.info(
            "Transaction %s found: account=%s purpose=%s chama=%s status=%s",
            reference,
            transaction.account_id,
            transaction.purpose,
            transaction.chama_id,
            transaction.status,
        )
        return transaction

    async def _charge_success(self, event: dict[str, Any], data: dict[str, Any]) -> WebhookOutcome:
        reference = data.get("reference")
        found = await self._lookup(EVENT_CHARGE_SUCCESS, reference)
        if isinstance(found, WebhookOutcome):
            return found
        transaction = found

        amount_paid = _to_cents(data.get("amount"))
        channel = data.get("channel")
        paid_at = data.get("paid_at") or data.get("paidAt")
        fee, net = split_amount(amount_paid, self.fee_rate)

        transitioned = await self.payments.transition(
            reference,
            _SUCCESS_FROM,
            status=STATUS_SUCCESS,
            result_code=0,
            result_desc=f"Payment via {channel} successful",
            receipt_number=reference,
            transaction_date=paid_at,
            callback_data=event,
            updated_at=datetime.now(timezone.utc),
        )
        if not transitioned:
            logger.info("Transaction %s already settled; skipping replay", reference)
            return WebhookOutcome(
                event=EVENT_CHARGE_SUCCESS,
                reference=reference,
                status=LOG_DUPLICATE,
                detail="Transaction already successful",
            )

        logger.info(
            "Processing payment %s: paid=%s fee=%s net=%s purpose=%s channel=%s",
            reference,
            amount_paid,
            fee,
            net,
            transaction.purpose,
            channel,
        )

        if transaction.purpose == PURPOSE_CHAMA_PURCHASE and transaction.chama_id:
            await self._settle_chama_purchase(transaction, amount_paid, channel, paid_at, reference)

        if transaction.purpose in WALLET_CREDIT_PURPOSES:
            await self._credit_wallet(transaction, fee, net, channel, paid_at, reference)
        else:
            logger.info("Purpose %s does not credit the wallet", transaction.purpose)

        await self.fees.collect(
            account_id=transaction.account_id,
            amount_cents=fee,
            payment_reference=reference,
            source_transaction_id=(transaction.meta or {}).get("transaction_id") or transaction.id,
        )
        return WebhookOutcome(event=EVENT_CHARGE_SUCCESS, reference=reference, status=LOG_COMPLETED)

    async def _settle_chama_purchase(
        self,
        transaction: PaymentTransactionModel,
        amount_paid: int,
        channel: Optional[str],
        paid_at: Optional[str],
        reference: str,
    ) -> None:
        purchase = await self.chamas.find_pending_purchase(transaction.chama_id, transaction.account_id)
        if purchase is None:
            logger.warning(
                "No pending purchase of chama %s by %s", transaction.chama_id, transaction.account_id
            )
            await self._notify_if_taken(transaction, amount_paid, reference)
            return

        # amounts are whole minor units, so "within one cent" is equality
        if amount_paid == purchase.expected_amount_cents:
            granted = await self.chamas.grant_ownership(
                purchase,
                amount_paid_cents=amount_paid,
                paid_at=paid_at,
                reference=reference,
            )
            if not granted:
                await self.chamas.fail_purchase(
                    purchase,
                    amount_paid_cents=amount_paid,
                    reason=ALREADY_PURCHASED,
                )
                await self._notify_already_purchased(transaction, purchase.chama_name, amount_paid, reference)
                return
            await self.notifications.notify(
                account_id=transaction.account_id,
                chama_id=transaction.chama_id,
                type="chama_purchased",
                title="Chama Purchase Successful",
                message=(
                    f"You now own {purchase.chama_name}! "
                    "You can start inviting members and managing your chama."
                ),
                data={
                    "amount_cents": amount_paid,
                    "channel": channel,
                    "reference": reference,
                    "timestamp": paid_at,
                },
            )
            return

        logger.error(
            "Chama purchase %s amount mismatch: expected=%s paid=%s",
            purchase.id,
            purchase.expected_amount_cents,
            amount_paid,
        )
        await self.chamas.fail_purchase(
            purchase,
            amount_paid_cents=amount_paid,
            reason="Amount mismatch",
            details={"expected_cents": purchase.expected_amount_cents, "paid_cents": amount_paid},
        )
        await self.notifications.notify(
            account_id=transaction.account_id,
            chama_id=transaction.chama_id,
            type="payment_failed",
            title="Chama Purchase Failed",
            message=messages.amount_mismatch_message(purchase.expected_amount_cents, amount_paid),
        )

    async def _notify_if_taken(self, transaction: PaymentTransactionModel, amount_paid: int, reference: str) -> None:
        try:
            chama = await self.chamas.get_chama(transaction.chama_id)
        except ChamaNotFoundError:
            logger.warning("Chama %s for %s no longer exists", transaction.chama_id, reference)
            return
        if chama.purchased_by and chama.purchased_by != transaction.account_id:
            await self._notify_already_purchased(transaction, chama.name, amount_paid, reference)

    async def _notify_already_purchased(
        self,
        transaction: PaymentTransactionModel,
        chama_name: Optional[str],
        amount_paid: int,
        reference: str,
    ) -> None:
        await self.notifications.notify(
            account_id=transaction.account_id,
            chama_id=transaction.chama_id,
            type="payment_failed",
            title="Chama Purchase Failed",
            message=messages.already_purchased_message(chama_name, amount_paid),
            data={"amount_cents": amount_paid, "reference": reference, "reason": ALREADY_PURCHASED},
        )

    async def _credit_wallet(
        self,
        transaction: PaymentTransactionModel,
        fee: int,
        net: int,
        channel: Optional[str],
        paid_at: Optional[str],
        reference: str,
    ) -> None:
        if net <= 0:
            logger.warning("Nothing to credit for %s (net %s)", reference, net)
            return
        await self.wallets.credit(
            account_id=transaction.account_id,
            amount_cents=net,
            type="deposit",
            currency=transaction.currency,
            description=messages.deposit_description(channel, fee),
            reference=reference,
            payment_method=channel,
        )
        await self.notifications.notify(
            account_id=transaction.account_id,
            chama_id=transaction.chama_id,
            type="payment_success",
            title="Payment Successful",
            message=messages.credit_message(channel, net),
            data={
                "amount_cents": net,
                "channel": channel,
                "reference": reference,
                "timestamp": paid_at,
            },
        )

    async def _charge_failed(self, event: dict[str, Any], data: dict[str, Any]) -> WebhookOutcome:
        reference = data.get("reference")
        gateway_response = data.get("gateway_response")
        channel = data.get("channel")
        logger.info("Failed payment %s via %s: %s", reference, channel, gateway_response)

        found = await self._lookup(EVENT_CHARGE_FAILED, reference)
        if isinstance(found, WebhookOutcome):
            return found
        transaction = found

        available_balance = messages.parse_available_balance(gateway_response)
        user_message = messages.failure_message(gateway_response, channel, available_balance)

        transitioned = await self.payments.transition(
            reference,
            _FAILED_FROM,
            status=STATUS_FAILED,
            result_code=1,
            result_desc=user_message,
            callback_data={
                **event,
                "available_balance_cents": available_balance,
                "original_message": gateway_response,
            },
            updated_at=datetime.now(timezone.utc),
        )
        if not transitioned:
            logger.info("Transaction %s is %s; ignoring failure event", reference, transaction.status)
            return WebhookOutcome(
                event=EVENT_CHARGE_FAILED,
                reference=reference,
                status=LOG_DUPLICATE,
                detail=f"Transaction already {transaction.status}",
            )

        await self.notifications.notify(
            account_id=transaction.account_id,
            chama_id=transaction.chama_id,
            type="payment_failed",
            title="Payment Failed",
            message=user_message,
            data={
                "amount_cents": transaction.amount_cents,
                "channel": channel,
                "reference": reference,
                "available_balance_cents": available_balance,
                "reason": gateway_response,
            },
        )
        logger.info("Failed payment %s recorded", reference)
        return WebhookOutcome(event=EVENT_CHARGE_FAILED, reference=reference, status=LOG_COMPLETED)
