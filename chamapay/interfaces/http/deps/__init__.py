"""Reusable FastAPI dependencies."""

from .database import get_db_session
from .account import get_account_repository, get_account_service
from .paystack import get_paystack_client

__all__ = [
    "get_db_session",
    "get_account_repository",
    "get_account_service",
    "get_paystack_client",
]
