"""create accounts, wallets, payments, chamas and webhook tables

Revision ID: 3f9a7c21d0b4
Revises: 
Create Date: 2026-10-16 09:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9a7c21d0b4"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("full_name", sa.String(length=150)),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20)),
        sa.Column("is_active", sa.Boolean()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_accounts_username", "accounts", ["username"], unique=True)
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)

    op.create_table(
        "wallets",
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), primary_key=True),
        sa.Column("balance_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="KES"),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "wallet_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="KES"),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="completed"),
        sa.Column("description", sa.String(length=255)),
        sa.Column("reference", sa.String(length=100)),
        sa.Column("payment_method", sa.String(length=30)),
        sa.Column("counterparty_id", sa.String(length=36), sa.ForeignKey("accounts.id")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_wallet_transactions_account_id", "wallet_transactions", ["account_id"])
    op.create_index("ix_wallet_transactions_reference", "wallet_transactions", ["reference"])

    op.create_table(
        "chamas",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("max_members", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("sale_price_cents", sa.Integer(), nullable=False),
        sa.Column("total_savings_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("purchased_by", sa.String(length=36), sa.ForeignKey("accounts.id")),
        sa.Column("purchased_at", sa.String(length=40)),
        sa.Column("purchase_amount_cents", sa.Integer()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "chama_members",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("chama_id", sa.String(length=36), sa.ForeignKey("chamas.id"), nullable=False),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="member"),
        sa.Column("is_active", sa.Boolean()),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("chama_id", "account_id", name="uq_chama_members_chama_account"),
    )
    op.create_index("ix_chama_members_chama_id", "chama_members", ["chama_id"])
    op.create_index("ix_chama_members_account_id", "chama_members", ["account_id"])

    op.create_table(
        "pending_chama_purchases",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("chama_id", sa.String(length=36), sa.ForeignKey("chamas.id"), nullable=False),
        sa.Column("buyer_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("expected_amount_cents", sa.Integer(), nullable=False),
        sa.Column("amount_paid_cents", sa.Integer()),
        sa.Column("payment_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("payment_verified_at", sa.String(length=40)),
        sa.Column("ownership_granted", sa.Boolean()),
        sa.Column("paystack_reference", sa.String(length=100)),
        sa.Column("meta", sa.JSON()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_pending_chama_purchases_chama_id", "pending_chama_purchases", ["chama_id"])
    op.create_index("ix_pending_chama_purchases_buyer_id", "pending_chama_purchases", ["buyer_id"])

    op.create_table(
        "payment_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("reference", sa.String(length=100), nullable=False),
        sa.Column("purpose", sa.String(length=30), nullable=False),
        sa.Column("chama_id", sa.String(length=36), sa.ForeignKey("chamas.id")),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="KES"),
        sa.Column("payment_method", sa.String(length=30)),
        sa.Column("phone_number", sa.String(length=20)),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("result_code", sa.Integer()),
        sa.Column("result_desc", sa.Text()),
        sa.Column("receipt_number", sa.String(length=100)),
        sa.Column("transaction_date", sa.String(length=40)),
        sa.Column("callback_data", sa.JSON()),
        sa.Column("meta", sa.JSON()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_payment_transactions_account_id", "payment_transactions", ["account_id"])
    op.create_index("ix_payment_transactions_reference", "payment_transactions", ["reference"], unique=True)

    op.create_table(
        "paystack_webhooks",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("event_type", sa.String(length=50), nullable=False),
        sa.Column("reference", sa.String(length=100)),
        sa.Column("amount_cents", sa.Integer()),
        sa.Column("channel", sa.String(length=30)),
        sa.Column("customer_email", sa.String(length=254)),
        sa.Column("payload", sa.JSON()),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="processing"),
        sa.Column("error_message", sa.Text()),
        sa.Column("processed_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_paystack_webhooks_reference", "paystack_webhooks", ["reference"])

    op.create_table(
        "chama_notifications",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("chama_id", sa.String(length=36), sa.ForeignKey("chamas.id")),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("title", sa.String(length=150), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("data", sa.JSON()),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_chama_notifications_account_id", "chama_notifications", ["account_id"])

    op.create_table(
        "platform_fees",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("fee_type", sa.String(length=30), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("source_transaction_id", sa.String(length=36)),
        sa.Column("payment_reference", sa.String(length=100)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("fee_type", "payment_reference", name="uq_platform_fees_type_reference"),
    )
    op.create_index("ix_platform_fees_account_id", "platform_fees", ["account_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id")),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("resource_type", sa.String(length=50), nullable=False),
        sa.Column("resource_id", sa.String(length=36)),
        sa.Column("new_values", sa.JSON()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_account_id", "audit_logs", ["account_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_account_id", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_platform_fees_account_id", table_name="platform_fees")
    op.drop_table("platform_fees")
    op.drop_index("ix_chama_notifications_account_id", table_name="chama_notifications")
    op.drop_table("chama_notifications")
    op.drop_index("ix_paystack_webhooks_reference", table_name="paystack_webhooks")
    op.drop_table("paystack_webhooks")
    op.drop_index("ix_payment_transactions_reference", table_name="payment_transactions")
    op.drop_index("ix_payment_transactions_account_id", table_name="payment_transactions")
    op.drop_table("payment_transactions")
    op.drop_index("ix_pending_chama_purchases_buyer_id", table_name="pending_chama_purchases")
    op.drop_index("ix_pending_chama_purchases_chama_id", table_name="pending_chama_purchases")
    op.drop_table("pending_chama_purchases")
    op.drop_index("ix_chama_members_account_id", table_name="chama_members")
    op.drop_index("ix_chama_members_chama_id", table_name="chama_members")
    op.drop_table("chama_members")
    op.drop_table("chamas")
    op.drop_index("ix_wallet_transactions_reference", table_name="wallet_transactions")
    op.drop_index("ix_wallet_transactions_account_id", table_name="wallet_transactions")
    op.drop_table("wallet_transactions")
    op.drop_table("wallets")
    op.drop_index("ix_accounts_email", table_name="accounts")
    op.drop_index("ix_accounts_username", table_name="accounts")
    op.drop_table("accounts")
