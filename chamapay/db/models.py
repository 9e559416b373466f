"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from chamapay.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(254), unique=True, nullable=False, index=True)
    full_name = Column(String(150))
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="user")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True))


class Wallet(Base):
    __tablename__ = "wallets"

    account_id = Column(String(36), ForeignKey("accounts.id"), primary_key=True)
    balance_cents = Column(Integer, nullable=False, default=0)
    currency = Column(String(10), nullable=False, default="KES")
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    account = relationship("Account")


class WalletTransaction(Base):
    __tablename__ = "wallet_transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    amount_cents = Column(Integer, nullable=False)
    currency = Column(String(10), nullable=False, default="KES")
    type = Column(String(20), nullable=False)  # deposit, transfer_in, transfer_out, sync
    status = Column(String(20), nullable=False, default="completed")
    description = Column(String(255))
    reference = Column(String(100), index=True)
    payment_method = Column(String(30))
    counterparty_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PaymentTransaction(Base):
    __tablename__ = "payment_transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    reference = Column(String(100), unique=True, nullable=False, index=True)
    purpose = Column(String(30), nullable=False)
    chama_id = Column(String(36), ForeignKey("chamas.id"), nullable=True)
    amount_cents = Column(Integer, nullable=False)
    currency = Column(String(10), nullable=False, default="KES")
    payment_method = Column(String(30))
    phone_number = Column(String(20))
    status = Column(String(20), nullable=False, default="pending")  # pending, success, failed
    result_code = Column(Integer)
    result_desc = Column(Text)
    receipt_number = Column(String(100))
    transaction_date = Column(String(40))
    callback_data = Column(JSON)
    meta = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    account = relationship("Account")
    chama = relationship("Chama")


class PaystackWebhook(Base):
    __tablename__ = "paystack_webhooks"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    event_type = Column(String(50), nullable=False)
    reference = Column(String(100), index=True)
    amount_cents = Column(Integer)
    channel = Column(String(30))
    customer_email = Column(String(254))
    payload = Column(JSON)
    status = Column(String(20), nullable=False, default="processing")
    error_message = Column(Text)
    processed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Chama(Base):
    __tablename__ = "chamas"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(150), nullable=False)
    description = Column(Text)
    max_members = Column(Integer, nullable=False, default=50)
    sale_price_cents = Column(Integer, nullable=False)
    total_savings_cents = Column(Integer, nullable=False, default=0)
    purchased_by = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    purchased_at = Column(String(40))
    purchase_amount_cents = Column(Integer)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship("ChamaMember", back_populates="chama", cascade="all, delete-orphan")


class ChamaMember(Base):
    __tablename__ = "chama_members"
    __table_args__ = (UniqueConstraint("chama_id", "account_id", name="uq_chama_members_chama_account"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    chama_id = Column(String(36), ForeignKey("chamas.id"), nullable=False, index=True)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="member")
    is_active = Column(Boolean, default=True)
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    chama = relationship("Chama", back_populates="members")


class PendingChamaPurchase(Base):
    __tablename__ = "pending_chama_purchases"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    chama_id = Column(String(36), ForeignKey("chamas.id"), nullable=False, index=True)
    buyer_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    expected_amount_cents = Column(Integer, nullable=False)
    amount_paid_cents = Column(Integer)
    payment_status = Column(String(20), nullable=False, default="pending")  # pending, verified, failed
    payment_verified_at = Column(String(40))
    ownership_granted = Column(Boolean, default=False)
    paystack_reference = Column(String(100))
    meta = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    chama = relationship("Chama")


class ChamaNotification(Base):
    __tablename__ = "chama_notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    chama_id = Column(String(36), ForeignKey("chamas.id"), nullable=True)
    type = Column(String(30), nullable=False)
    title = Column(String(150), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PlatformFee(Base):
    __tablename__ = "platform_fees"
    __table_args__ = (UniqueConstraint("fee_type", "payment_reference", name="uq_platform_fees_type_reference"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    fee_type = Column(String(30), nullable=False)
    amount_cents = Column(Integer, nullable=False)
    source_transaction_id = Column(String(36))
    payment_reference = Column(String(100))
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True, index=True)
    action = Column(String(50), nullable=False)
    resource_type = Column(String(50), nullable=False)
    resource_id = Column(String(36))
    new_values = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
