"""HTTP surface of the Paystack webhook."""

import json

from sqlalchemy import select

from chamapay.core.crypto import sign_payload
from chamapay.db.models import PaymentTransaction, PaystackWebhook
from chamapay.infrastructure.database.repositories.payment_repository import SqlPaymentTransactionRepository
from chamapay.modules.wallets import WalletService

from .conftest import PAYSTACK_SECRET


def _signed(payload):
    body = json.dumps(payload).encode("utf-8")
    return body, {"x-paystack-signature": sign_payload(PAYSTACK_SECRET, body), "content-type": "application/json"}


async def test_signed_charge_success_is_processed(client, db_session, make_account):
    member = await make_account("wafula")
    await SqlPaymentTransactionRepository(db_session).create(
        account_id=member.id,
        reference="CHP_HTTP1",
        purpose="add_money",
        amount_cents=200000,
        currency="KES",
        chama_id=None,
        payment_method=None,
        phone_number=None,
        meta=None,
    )
    await db_session.commit()

    body, headers = _signed(
        {"event": "charge.success", "data": {"reference": "CHP_HTTP1", "amount": 200000, "channel": "card"}}
    )
    response = await client.post("/api/webhooks/paystack", content=body, headers=headers)

    assert response.status_code == 200
    assert response.json() == {"received": True, "status": "completed", "reference": "CHP_HTTP1"}
    wallet = await WalletService.with_session(db_session).ensure_wallet(member.id)
    assert wallet.balance_cents == 195000


async def test_missing_signature_is_rejected(client, db_session):
    body = json.dumps({"event": "charge.success", "data": {"reference": "CHP_X"}}).encode()
    response = await client.post("/api/webhooks/paystack", content=body)

    assert response.status_code == 401
    assert (await db_session.execute(select(PaystackWebhook))).first() is None


async def test_bad_signature_is_rejected(client):
    body, headers = _signed({"event": "charge.success", "data": {"reference": "CHP_X"}})
    headers["x-paystack-signature"] = sign_payload("sk_test_other", body)
    response = await client.post("/api/webhooks/paystack", content=body, headers=headers)

    assert response.status_code == 401


async def test_malformed_body_is_rejected(client):
    body = b"{not json"
    headers = {"x-paystack-signature": sign_payload(PAYSTACK_SECRET, body)}
    response = await client.post("/api/webhooks/paystack", content=body, headers=headers)

    assert response.status_code == 400


async def test_unexpected_failure_rolls_back_and_asks_for_retry(client, db_session, make_account, monkeypatch):
    member = await make_account("kiprop")
    await SqlPaymentTransactionRepository(db_session).create(
        account_id=member.id,
        reference="CHP_BOOM",
        purpose="wallet_topup",
        amount_cents=10000,
        currency="KES",
        chama_id=None,
        payment_method=None,
        phone_number=None,
        meta=None,
    )
    await db_session.commit()

    async def _explode(self, **kwargs):
        raise RuntimeError("fee ledger unavailable")

    monkeypatch.setattr("chamapay.modules.payments.fees.FeeService.collect", _explode)
    body, headers = _signed({"event": "charge.success", "data": {"reference": "CHP_BOOM", "amount": 10000}})
    response = await client.post("/api/webhooks/paystack", content=body, headers=headers)

    assert response.status_code == 500
    tx = (
        await db_session.execute(
            select(PaymentTransaction)
            .where(PaymentTransaction.reference == "CHP_BOOM")
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert tx.status == "pending"
    wallet = await WalletService.with_session(db_session).ensure_wallet(member.id)
    assert wallet.balance_cents == 0
