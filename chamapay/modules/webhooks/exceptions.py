"""Webhook processing exceptions."""


class WebhookError(Exception):
    """Base class for webhook errors."""


class WebhookSignatureError(WebhookError):
    """Raised when the signature header is missing or does not match the body."""


class WebhookPayloadError(WebhookError):
    """Raised when the body is not a Paystack event envelope."""
