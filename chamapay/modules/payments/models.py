"""Domain models for provider-backed payments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

PURPOSE_WALLET_TOPUP = "wallet_topup"
PURPOSE_ADD_MONEY = "add_money"
PURPOSE_OTHER = "other"
PURPOSE_CHAMA_PURCHASE = "chama_purchase"

# Successful charges with these purposes land in the payer's central wallet.
WALLET_CREDIT_PURPOSES = frozenset({PURPOSE_OTHER, PURPOSE_WALLET_TOPUP, PURPOSE_ADD_MONEY})
PAYMENT_PURPOSES = WALLET_CREDIT_PURPOSES | {PURPOSE_CHAMA_PURCHASE}

STATUS_PENDING = "pending"
STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


@dataclass(slots=True)
class PaymentRecord:
    id: str
    account_id: str
    reference: str
    purpose: str
    chama_id: Optional[str]
    amount_cents: int
    currency: str
    payment_method: Optional[str]
    status: str
    result_code: Optional[int]
    result_desc: Optional[str]
    receipt_number: Optional[str]
    transaction_date: Optional[str]
    meta: Optional[dict[str, Any]]
    created_at: datetime
    updated_at: Optional[datetime]

    @property
    def is_terminal(self) -> bool:
        return self.status in {STATUS_SUCCESS, STATUS_FAILED}


@dataclass(slots=True)
class CheckoutSession:
    reference: str
    authorization_url: str
    access_code: Optional[str]
    amount_cents: int
    currency: str
    purpose: str
