"""Wallet domain exceptions."""


class WalletError(Exception):
    """Base class for wallet errors."""


class InsufficientFundsError(WalletError):
    """Raised when a debit exceeds the available balance."""

    def __init__(self, account_id: str, balance_cents: int, requested_cents: int) -> None:
        super().__init__(
            f"Insufficient wallet balance: available {balance_cents}, requested {requested_cents}"
        )
        self.account_id = account_id
        self.balance_cents = balance_cents
        self.requested_cents = requested_cents
