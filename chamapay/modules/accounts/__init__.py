"""Account domain services and models."""

from .models import Account, AccountCreateInput
from .service import AccountService, normalize_email
from .exceptions import (
    AccountError,
    AccountAlreadyExistsError,
    AccountNotFoundError,
)

__all__ = [
    "Account",
    "AccountCreateInput",
    "AccountService",
    "AccountError",
    "AccountAlreadyExistsError",
    "AccountNotFoundError",
    "normalize_email",
]
