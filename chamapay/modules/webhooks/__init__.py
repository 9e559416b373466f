"""Paystack webhook handling."""

from .exceptions import WebhookError, WebhookPayloadError, WebhookSignatureError
from .models import (
    EVENT_CHARGE_FAILED,
    EVENT_CHARGE_SUCCESS,
    LOG_COMPLETED,
    LOG_DUPLICATE,
    LOG_FAILED,
    LOG_IGNORED,
    WebhookOutcome,
)
from .service import PaystackWebhookService

__all__ = [
    "EVENT_CHARGE_FAILED",
    "EVENT_CHARGE_SUCCESS",
    "LOG_COMPLETED",
    "LOG_DUPLICATE",
    "LOG_FAILED",
    "LOG_IGNORED",
    "PaystackWebhookService",
    "WebhookError",
    "WebhookOutcome",
    "WebhookPayloadError",
    "WebhookSignatureError",
]
