"""Payment domain exceptions."""


class PaymentError(Exception):
    """Base class for payment errors."""


class PaymentValidationError(PaymentError):
    """Raised when a checkout request is rejected before reaching Paystack."""


class PaymentNotFoundError(PaymentError):
    """Raised when a payment reference is unknown to the caller."""
