"""Webhook processing results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

EVENT_CHARGE_SUCCESS = "charge.success"
EVENT_CHARGE_FAILED = "charge.failed"

LOG_COMPLETED = "completed"
LOG_FAILED = "failed"
LOG_DUPLICATE = "duplicate"
LOG_IGNORED = "ignored"


@dataclass(slots=True)
class WebhookOutcome:
    event: str
    reference: Optional[str]
    status: str
    detail: Optional[str] = None
