"""Paystack REST API integration."""

from .client import PaystackBalance, PaystackCheckout, PaystackClient, PaystackError

__all__ = ["PaystackBalance", "PaystackCheckout", "PaystackClient", "PaystackError"]
