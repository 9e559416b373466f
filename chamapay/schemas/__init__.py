"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = Field(default=None, max_length=150)


class LoginRequest(BaseModel):
    login: str = Field(..., min_length=3, max_length=254, description="Username or email")
    password: str = Field(..., min_length=6)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    account_id: str
    username: str
    role: str


class AccountResponse(BaseModel):
    id: str
    username: str
    email: str
    full_name: Optional[str] = None
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(Token):
    account: AccountResponse


class WalletResponse(BaseModel):
    account_id: str
    balance_cents: int
    currency: str
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionResponse(BaseModel):
    id: str
    amount_cents: int
    currency: str
    type: str
    status: str
    description: Optional[str] = None
    reference: Optional[str] = None
    payment_method: Optional[str] = None
    counterparty_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionListResponse(BaseModel):
    transactions: list[WalletTransactionResponse]


class BalanceSyncRequest(BaseModel):
    account_id: Optional[str] = None


class BalanceSyncResponse(BaseModel):
    account_id: str
    balance_cents: int
    currency: str
    synced_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentInitializeRequest(BaseModel):
    amount_cents: int = Field(..., gt=0)
    purpose: Literal["wallet_topup", "add_money", "other"] = "wallet_topup"
    email: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)
    description: Optional[str] = Field(default=None, max_length=255)
    metadata: dict[str, Any] = Field(default_factory=dict)


class CheckoutResponse(BaseModel):
    reference: str
    authorization_url: str
    access_code: Optional[str] = None
    amount_cents: int
    currency: str
    purpose: str

    model_config = ConfigDict(from_attributes=True)


class PaymentStatusResponse(BaseModel):
    reference: str
    purpose: str
    status: str
    amount_cents: int
    currency: str
    chama_id: Optional[str] = None
    result_desc: Optional[str] = None
    receipt_number: Optional[str] = None
    transaction_date: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WebhookAck(BaseModel):
    received: bool = True
    status: str
    reference: Optional[str] = None


class RecipientCheckResponse(BaseModel):
    email: str
    is_member: bool
    display_name: Optional[str] = None
    transfer_kind: str

    model_config = ConfigDict(from_attributes=True)


class WalletTransferRequest(BaseModel):
    recipient_email: str = Field(..., min_length=3, max_length=254)
    amount_cents: int
    description: Optional[str] = None


class WalletTransferResponse(BaseModel):
    recipient_id: str
    recipient_name: str
    amount_cents: int
    currency: str
    sender_balance_cents: int

    model_config = ConfigDict(from_attributes=True)


class ExternalTransferRequest(BaseModel):
    payment_method: Literal["mpesa", "airtel", "card_bank"]
    amount_cents: int
    email: Optional[str] = None
    recipient_phone: Optional[str] = None
    recipient: Optional[str] = None
    description: Optional[str] = None


class ChamaCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    sale_price_cents: int = Field(..., gt=0)
    max_members: int = Field(default=50, ge=1)


class ChamaResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    max_members: int
    sale_price_cents: int
    total_savings_cents: int
    purchased_by: Optional[str] = None
    purchased_at: Optional[str] = None
    is_purchased: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ChamaListResponse(BaseModel):
    chamas: list[ChamaResponse]


class ChamaMemberResponse(BaseModel):
    id: str
    account_id: str
    role: str
    is_active: bool
    joined_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ChamaPurchaseRequest(BaseModel):
    email: Optional[str] = None


class ChamaPurchaseResponse(BaseModel):
    purchase_id: str
    chama_id: str
    expected_amount_cents: int
    checkout: CheckoutResponse


class NotificationResponse(BaseModel):
    id: str
    chama_id: Optional[str] = None
    type: str
    title: str
    message: str
    data: Optional[dict[str, Any]] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
