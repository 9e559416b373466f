"""Domain models for chamas and their purchase records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

ALREADY_PURCHASED = "Chama already purchased"


@dataclass(slots=True)
class Chama:
    id: str
    name: str
    description: Optional[str]
    max_members: int
    sale_price_cents: int
    total_savings_cents: int
    purchased_by: Optional[str]
    purchased_at: Optional[str]
    purchase_amount_cents: Optional[int]
    created_at: Optional[datetime]

    @property
    def is_purchased(self) -> bool:
        return self.purchased_by is not None


@dataclass(slots=True)
class ChamaMember:
    id: str
    chama_id: str
    account_id: str
    role: str
    is_active: bool
    joined_at: Optional[datetime]


@dataclass(slots=True)
class ChamaPurchase:
    id: str
    chama_id: str
    chama_name: Optional[str]
    buyer_id: str
    expected_amount_cents: int
    amount_paid_cents: Optional[int]
    payment_status: str
    ownership_granted: bool
    paystack_reference: Optional[str]
    meta: Optional[dict[str, Any]]
    created_at: Optional[datetime]
