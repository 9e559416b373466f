"""Send-money exceptions."""


class TransferError(Exception):
    """Base class for send-money errors."""


class TransferValidationError(TransferError):
    """Raised when a transfer request is malformed."""


class RecipientNotFoundError(TransferError):
    """Raised when an internal transfer names an address that is not a member."""

    def __init__(self, email: str) -> None:
        super().__init__(f"No member is registered with {email}")
        self.email = email
