"""Notification domain model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(slots=True)
class Notification:
    id: str
    account_id: str
    chama_id: Optional[str]
    type: str
    title: str
    message: str
    data: Optional[dict[str, Any]]
    is_read: bool
    created_at: datetime
