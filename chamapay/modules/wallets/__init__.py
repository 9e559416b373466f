"""Wallet domain exports"""

from .exceptions import InsufficientFundsError, WalletError
from .models import WalletSnapshot, WalletTransactionRecord
from .service import DEFAULT_CURRENCY, WalletService

__all__ = [
    "DEFAULT_CURRENCY",
    "InsufficientFundsError",
    "WalletError",
    "WalletSnapshot",
    "WalletTransactionRecord",
    "WalletService",
]
