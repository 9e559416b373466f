"""Domain modules and their public exports."""

from . import accounts, audit, chamas, notifications, payments, transfers, wallets, webhooks

__all__ = [
    "accounts",
    "audit",
    "chamas",
    "notifications",
    "payments",
    "transfers",
    "wallets",
    "webhooks",
]
