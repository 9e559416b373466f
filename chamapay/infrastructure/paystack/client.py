"""Async client for the subset of the Paystack API the service relies on."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

import httpx

from chamapay.core.config import PaystackSettings
from chamapay.core.crypto import signature_matches

logger = logging.getLogger(__name__)


class PaystackError(Exception):
    """Raised when Paystack is unreachable or rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


@dataclass(frozen=True, slots=True)
class PaystackCheckout:
    authorization_url: str
    access_code: Optional[str]
    reference: str


@dataclass(frozen=True, slots=True)
class PaystackBalance:
    balance_cents: int
    currency: str


class PaystackClient:
    """Thin wrapper around ``httpx.AsyncClient`` with bearer authentication.

    A new connection pool is opened per call; the volume of provider calls is a
    handful per user action. ``transport`` lets tests plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        settings: PaystackSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._transport = transport

    @property
    def secret_key(self) -> str:
        return self.settings.secret_key

    def verify_signature(self, body: bytes, signature: Optional[str]) -> bool:
        return signature_matches(self.secret_key, body, signature or "")

    async def initialize_transaction(
        self,
        *,
        email: str,
        amount_cents: int,
        reference: str,
        currency: Optional[str] = None,
        callback_url: Optional[str] = None,
        channels: Optional[Iterable[str]] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> PaystackCheckout:
        payload: dict[str, Any] = {
            "email": email,
            "amount": amount_cents,
            "reference": reference,
            "currency": currency or self.settings.currency,
        }
        callback = callback_url or self.settings.callback_url
        if callback:
            payload["callback_url"] = callback
        if channels:
            payload["channels"] = list(channels)
        if metadata:
            payload["metadata"] = metadata

        data = await self._request("POST", "/transaction/initialize", json=payload)
        try:
            return PaystackCheckout(
                authorization_url=data["authorization_url"],
                access_code=data.get("access_code"),
                reference=data.get("reference") or reference,
            )
        except (KeyError, TypeError) as exc:
            raise PaystackError("Malformed initialize response", payload=data) from exc

    async def fetch_balance(self) -> PaystackBalance:
        data = await self._request("GET", "/balance")
        entries = data if isinstance(data, list) else []
        first = entries[0] if entries else {}
        return PaystackBalance(
            balance_cents=int(first.get("balance") or 0),
            currency=first.get("currency") or "NGN",
        )

    async def _request(self, method: str, path: str, json: Optional[dict[str, Any]] = None) -> Any:
        if not self.secret_key:
            raise PaystackError("Paystack secret key not configured")

        headers = {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        try:
            async with httpx.AsyncClient(
                base_url=self.settings.base_url,
                headers=headers,
                timeout=self.settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.error("Paystack %s %s failed: %s", method, path, exc)
            raise PaystackError(f"Paystack request failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error:
            message = body.get("message") if isinstance(body, dict) else None
            logger.error("Paystack %s %s returned %s: %s", method, path, response.status_code, message)
            raise PaystackError(
                f"Paystack API error: {message or 'Unknown error'}",
                status_code=response.status_code,
                payload=body,
            )
        if not isinstance(body, dict) or not body.get("status"):
            message = body.get("message") if isinstance(body, dict) else None
            raise PaystackError(
                f"Paystack request unsuccessful: {message or 'Unknown error'}",
                status_code=response.status_code,
                payload=body,
            )
        return body.get("data")
