"""Send-money request and result models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

METHOD_MPESA = "mpesa"
METHOD_AIRTEL = "airtel"
METHOD_CARD_BANK = "card_bank"
EXTERNAL_METHODS = (METHOD_MPESA, METHOD_AIRTEL, METHOD_CARD_BANK)

MOBILE_MONEY_CHANNELS = ("mobile_money",)
CARD_BANK_CHANNELS = ("card", "bank", "ussd", "bank_transfer")

MAX_DESCRIPTION_LENGTH = 200


@dataclass(slots=True)
class RecipientCheck:
    email: str
    is_member: bool
    display_name: Optional[str] = None

    @property
    def transfer_kind(self) -> str:
        return "internal" if self.is_member else "external"


@dataclass(slots=True)
class InternalTransferResult:
    recipient_id: str
    recipient_name: str
    amount_cents: int
    currency: str
    sender_balance_cents: int


@dataclass(slots=True)
class ExternalTransferRequest:
    payment_method: str
    amount_cents: int
    email: str
    recipient_phone: Optional[str] = None
    recipient: Optional[str] = None
    description: Optional[str] = None
