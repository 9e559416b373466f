"""Paystack client dependency."""

from chamapay.core.config import get_settings
from chamapay.infrastructure.paystack import PaystackClient


def get_paystack_client() -> PaystackClient:
    return PaystackClient(get_settings().paystack)


__all__ = ["get_paystack_client"]
