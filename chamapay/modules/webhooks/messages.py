"""User-facing texts derived from Paystack charge payloads."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

# e.g. "Your Airtel Money balance is Ksh 35.00"
_BALANCE_PATTERN = re.compile(
    r"balance\s+is\s+(?:Ksh|KES)\.?\s*([0-9][0-9,]*(?:\.[0-9]+)?)",
    re.IGNORECASE,
)

_DEPOSIT_LABELS = {
    "mobile_money": "M-Pesa",
    "bank": "Bank Transfer",
    "card": "Card",
}

_CREDIT_LABELS = {
    "mobile_money": "M-Pesa/Airtel Money",
    "bank": "Bank Transfer",
    "card": "Card Payment",
}


def format_amount(amount_cents: int) -> str:
    """Render minor units as a two-decimal major-unit string: 97500 -> '975.00'."""
    return f"{Decimal(amount_cents) / 100:.2f}"


def deposit_label(channel: Optional[str]) -> str:
    return _DEPOSIT_LABELS.get(channel or "", "Paystack")


def credit_label(channel: Optional[str]) -> str:
    return _CREDIT_LABELS.get(channel or "", "Paystack")


def deposit_description(channel: Optional[str], fee_cents: int) -> str:
    return f"{deposit_label(channel)} deposit (Fee: KES {format_amount(fee_cents)})"


def credit_message(channel: Optional[str], net_cents: int) -> str:
    return f"KES {format_amount(net_cents)} added via {credit_label(channel)}"


def parse_available_balance(gateway_response: Optional[str]) -> Optional[int]:
    """Extract the payer's reported balance, in minor units, from a gateway response."""
    if not gateway_response:
        return None
    match = _BALANCE_PATTERN.search(gateway_response)
    if match is None:
        return None
    try:
        value = Decimal(match.group(1).replace(",", ""))
    except InvalidOperation:
        return None
    return int((value * 100).to_integral_value())


def failure_message(gateway_response: Optional[str], channel: Optional[str], available_balance_cents: Optional[int]) -> str:
    reason = gateway_response or "Payment failed"
    if available_balance_cents is not None:
        kind = "mobile money" if channel == "mobile_money" else "account"
        return "\n".join(
            [
                f"Payment failed: Insufficient {kind} balance",
                f"Available balance: KES {format_amount(available_balance_cents)}",
                "Please top up your account or try a smaller amount.",
            ]
        )
    if channel == "mobile_money":
        return "\n".join(
            [
                "Mobile Money transaction failed",
                reason,
                "Please try again or contact your provider.",
            ]
        )
    return reason


def amount_mismatch_message(expected_cents: int, paid_cents: int) -> str:
    return (
        f"Payment amount mismatch. Expected KES {format_amount(expected_cents)}, "
        f"received KES {format_amount(paid_cents)}. Please contact support."
    )


def already_purchased_message(chama_name: Optional[str], paid_cents: int) -> str:
    name = chama_name or "This chama"
    return (
        f"{name} was bought by another member before your payment of KES {format_amount(paid_cents)} "
        "arrived. Please contact support for a refund."
    )
