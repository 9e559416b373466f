"""SQLAlchemy-backed repository implementations."""

from .account_repository import SqlAccountRepository
from .audit_repository import SqlAuditRepository
from .chama_repository import SqlChamaRepository
from .fee_repository import SqlFeeRepository
from .notification_repository import SqlNotificationRepository
from .payment_repository import SqlPaymentTransactionRepository
from .wallet_repository import SqlWalletRepository
from .webhook_repository import SqlWebhookLogRepository

__all__ = [
    "SqlAccountRepository",
    "SqlAuditRepository",
    "SqlChamaRepository",
    "SqlFeeRepository",
    "SqlNotificationRepository",
    "SqlPaymentTransactionRepository",
    "SqlWalletRepository",
    "SqlWebhookLogRepository",
]
