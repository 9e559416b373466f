"""Provider-backed payment services."""

from .balance_sync import BalanceSyncResult, BalanceSyncService
from .exceptions import PaymentError, PaymentNotFoundError, PaymentValidationError
from .fees import FeeService, compute_platform_fee, split_amount
from .models import (
    PAYMENT_PURPOSES,
    PURPOSE_ADD_MONEY,
    PURPOSE_CHAMA_PURCHASE,
    PURPOSE_OTHER,
    PURPOSE_WALLET_TOPUP,
    WALLET_CREDIT_PURPOSES,
    CheckoutSession,
    PaymentRecord,
)
from .service import PaymentService, generate_reference, to_payment_record

__all__ = [
    "BalanceSyncResult",
    "BalanceSyncService",
    "CheckoutSession",
    "FeeService",
    "PAYMENT_PURPOSES",
    "PURPOSE_ADD_MONEY",
    "PURPOSE_CHAMA_PURCHASE",
    "PURPOSE_OTHER",
    "PURPOSE_WALLET_TOPUP",
    "PaymentError",
    "PaymentNotFoundError",
    "PaymentRecord",
    "PaymentService",
    "PaymentValidationError",
    "WALLET_CREDIT_PURPOSES",
    "compute_platform_fee",
    "generate_reference",
    "split_amount",
    "to_payment_record",
]
