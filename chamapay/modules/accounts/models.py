"""Domain models for accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Account:
    id: str
    username: str
    email: str
    role: str
    is_active: bool
    password_hash: str = field(repr=False)
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def display_name(self) -> str:
        return self.full_name or self.username


@dataclass(slots=True)
class AccountCreateInput:
    username: str
    email: str
    password: str
    role: str = "user"
    full_name: Optional[str] = None
    is_active: bool = True
