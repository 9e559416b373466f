"""Send-money use cases.

Internal transfers move funds between two member wallets in the caller's session.
External transfers create a Paystack checkout; the recipient is paid outside the
platform and the webhook settles the charge like any other ``other`` payment.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.infrastructure.paystack import PaystackClient
from chamapay.modules.accounts import Account, AccountService
from chamapay.modules.notifications import NotificationService
from chamapay.modules.payments import PURPOSE_OTHER, CheckoutSession, PaymentService
from chamapay.modules.wallets import WalletService
from chamapay.modules.webhooks.messages import format_amount

from .exceptions import RecipientNotFoundError, TransferValidationError
from .models import (
    CARD_BANK_CHANNELS,
    EXTERNAL_METHODS,
    MAX_DESCRIPTION_LENGTH,
    METHOD_CARD_BANK,
    MOBILE_MONEY_CHANNELS,
    ExternalTransferRequest,
    InternalTransferResult,
    RecipientCheck,
)

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_PATTERN = re.compile(r"^\d{9,15}$")


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_PATTERN.match(value or ""))


def normalize_phone(value: str) -> str:
    """Strip ``+`` and whitespace: '+254 712 345 678' -> '254712345678'."""
    return re.sub(r"[\s+]", "", value or "")


@dataclass(slots=True)
class TransferService:
    accounts: AccountService
    wallets: WalletService
    notifications: NotificationService
    payments: PaymentService

    @classmethod
    def with_session(cls, session: AsyncSession, paystack: PaystackClient) -> "TransferService":
        return cls(
            accounts=AccountService.with_session(session),
            wallets=WalletService.with_session(session),
            notifications=NotificationService.with_session(session),
            payments=PaymentService.with_session(session, paystack),
        )

    async def check_recipient(self, email: str) -> RecipientCheck:
        email = (email or "").strip()
        if not is_valid_email(email):
            return RecipientCheck(email=email, is_member=False)
        account = await self.accounts.find_by_email(email)
        if account is None or not account.is_active:
            return RecipientCheck(email=email.lower(), is_member=False)
        return RecipientCheck(email=account.email, is_member=True, display_name=account.display_name)

    async def transfer_to_member(
        self,
        *,
        sender: Account,
        recipient_email: str,
        amount_cents: int,
        description: Optional[str] = None,
    ) -> InternalTransferResult:
        recipient_email = (recipient_email or "").strip()
        if not is_valid_email(recipient_email):
            raise TransferValidationError("Please enter a valid email address")
        if amount_cents <= 0:
            raise TransferValidationError("Amount must be greater than 0")
        description = (description or "").strip() or None
        if description and len(description) > MAX_DESCRIPTION_LENGTH:
            raise TransferValidationError(
                f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"
            )

        recipient = await self.accounts.find_by_email(recipient_email)
        if recipient is None or not recipient.is_active:
            raise RecipientNotFoundError(recipient_email.lower())
        if recipient.id == sender.id:
            raise TransferValidationError("You cannot send money to yourself")

        sender_wallet = await self.wallets.debit(
            account_id=sender.id,
            amount_cents=amount_cents,
            type="transfer_out",
            description=description or f"Sent to {recipient.email}",
            counterparty_id=recipient.id,
        )
        await self.wallets.credit(
            account_id=recipient.id,
            amount_cents=amount_cents,
            type="transfer_in",
            currency=sender_wallet.currency,
            description=description or f"Received from {sender.email}",
            counterparty_id=sender.id,
        )

        amount_text = format_amount(amount_cents)
        await self.notifications.notify(
            account_id=sender.id,
            type="money_sent",
            title="Money Sent",
            message=f"KES {amount_text} sent to {recipient.email}",
            data={"amount_cents": amount_cents, "recipient_id": recipient.id},
        )
        await self.notifications.notify(
            account_id=recipient.id,
            type="money_received",
            title="Money Received",
            message=f"KES {amount_text} received from {sender.display_name}",
            data={"amount_cents": amount_cents, "sender_id": sender.id, "description": description},
        )
        logger.info("Transfer of %s from %s to %s completed", amount_cents, sender.id, recipient.id)
        return InternalTransferResult(
            recipient_id=recipient.id,
            recipient_name=recipient.display_name,
            amount_cents=amount_cents,
            currency=sender_wallet.currency,
            sender_balance_cents=sender_wallet.balance_cents,
        )

    async def start_external_transfer(
        self,
        *,
        sender: Account,
        request: ExternalTransferRequest,
    ) -> CheckoutSession:
        if request.payment_method not in EXTERNAL_METHODS:
            raise TransferValidationError(f"Unsupported payment method: {request.payment_method}")
        if request.amount_cents <= 0:
            raise TransferValidationError("Amount must be greater than 0")
        if not (request.email or "").strip():
            raise TransferValidationError("Email is required for payment")

        phone = normalize_phone(request.recipient_phone or "")
        if request.payment_method != METHOD_CARD_BANK:
            if not phone:
                raise TransferValidationError("Recipient phone number is required")
        if phone and not _PHONE_PATTERN.match(phone):
            raise TransferValidationError("Phone number must have 9 to 15 digits")

        target = phone or (request.recipient or "").strip()
        if not target:
            raise TransferValidationError("Recipient is required")
        notes = (request.description or "").strip() or None
        channels = CARD_BANK_CHANNELS if request.payment_method == METHOD_CARD_BANK else MOBILE_MONEY_CHANNELS

        checkout = await self.payments.initialize_payment(
            account=sender,
            email=request.email.strip(),
            amount_cents=request.amount_cents,
            purpose=PURPOSE_OTHER,
            description=f"Send money to {target}",
            phone_number=phone or None,
            payment_method=request.payment_method,
            metadata={"payment_type": "send_money", "recipient": target, "notes": notes},
            channels=channels,
        )
        logger.info("External transfer %s started by %s to %s", checkout.reference, sender.id, target)
        return checkout
