"""Domain models for wallet operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class WalletSnapshot:
    account_id: str
    balance_cents: int
    currency: str
    updated_at: Optional[datetime]


@dataclass(slots=True)
class WalletTransactionRecord:
    id: str
    account_id: str
    amount_cents: int
    currency: str
    type: str
    status: str
    description: Optional[str]
    reference: Optional[str]
    payment_method: Optional[str]
    counterparty_id: Optional[str]
    created_at: datetime
