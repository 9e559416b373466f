"""Send money between members or to external recipients."""

from .exceptions import RecipientNotFoundError, TransferError, TransferValidationError
from .models import (
    EXTERNAL_METHODS,
    ExternalTransferRequest,
    InternalTransferResult,
    RecipientCheck,
)
from .service import TransferService, is_valid_email, normalize_phone

__all__ = [
    "EXTERNAL_METHODS",
    "ExternalTransferRequest",
    "InternalTransferResult",
    "RecipientCheck",
    "RecipientNotFoundError",
    "TransferError",
    "TransferService",
    "TransferValidationError",
    "is_valid_email",
    "normalize_phone",
]
