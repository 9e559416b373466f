"""Webhook processing against a real schema."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from chamapay.db.models import (
    Chama,
    ChamaMember,
    ChamaNotification,
    PaymentTransaction,
    PaystackWebhook,
    PendingChamaPurchase,
    PlatformFee,
    WalletTransaction,
)
from chamapay.infrastructure.database.repositories.payment_repository import SqlPaymentTransactionRepository
from chamapay.modules.chamas import ChamaService
from chamapay.modules.wallets import WalletService
from chamapay.modules.webhooks import (
    LOG_COMPLETED,
    LOG_DUPLICATE,
    LOG_FAILED,
    LOG_IGNORED,
    PaystackWebhookService,
    WebhookPayloadError,
    WebhookSignatureError,
)
from chamapay.core.crypto import sign_payload

from .conftest import PAYSTACK_SECRET


@pytest.fixture
def service(db_session, paystack_client):
    return PaystackWebhookService.with_session(db_session, paystack_client, Decimal("0.025"))


async def _pending(db_session, account, reference, *, amount_cents=100000, purpose="wallet_topup", chama_id=None, meta=None):
    tx = await SqlPaymentTransactionRepository(db_session).create(
        account_id=account.id,
        reference=reference,
        purpose=purpose,
        amount_cents=amount_cents,
        currency="KES",
        chama_id=chama_id,
        payment_method=None,
        phone_number=None,
        meta=meta,
    )
    await db_session.commit()
    return tx


def _event(event_type, reference, *, amount=100000, channel="mobile_money", **extra):
    data = {
        "reference": reference,
        "amount": amount,
        "channel": channel,
        "paid_at": "2026-10-16T09:15:00.000Z",
        "customer": {"email": "payer@example.com"},
    }
    data.update(extra)
    return {"event": event_type, "data": data}


async def _log_status(db_session, reference):
    result = await db_session.execute(
        select(PaystackWebhook.status)
        .where(PaystackWebhook.reference == reference)
        .order_by(PaystackWebhook.created_at.desc(), PaystackWebhook.processed_at.desc())
    )
    return [row[0] for row in result.all()]


async def _count(db_session, model, *criteria):
    result = await db_session.execute(select(func.count()).select_from(model).where(*criteria))
    return result.scalar_one()


async def test_charge_success_credits_net_amount(db_session, service, make_account):
    member = await make_account("wanjiku", balance_cents=100000)
    await _pending(db_session, member, "CHP_TOPUP1", meta={"transaction_id": "txn-42"})

    outcome = await service.process_event(_event("charge.success", "CHP_TOPUP1"))
    await db_session.commit()

    assert outcome.status == LOG_COMPLETED
    wallet = await WalletService.with_session(db_session).ensure_wallet(member.id)
    assert wallet.balance_cents == 100000 + 97500

    tx = (await db_session.execute(select(PaymentTransaction).where(PaymentTransaction.reference == "CHP_TOPUP1"))).scalar_one()
    await db_session.refresh(tx)
    assert tx.status == "success"
    assert tx.result_code == 0
    assert tx.result_desc == "Payment via mobile_money successful"
    assert tx.receipt_number == "CHP_TOPUP1"
    assert tx.transaction_date == "2026-10-16T09:15:00.000Z"

    deposit = (
        await db_session.execute(
            select(WalletTransaction).where(WalletTransaction.reference == "CHP_TOPUP1")
        )
    ).scalar_one()
    assert deposit.type == "deposit"
    assert deposit.amount_cents == 97500
    assert deposit.status == "completed"
    assert deposit.payment_method == "mobile_money"
    assert deposit.description == "M-Pesa deposit (Fee: KES 25.00)"

    notification = (
        await db_session.execute(select(ChamaNotification).where(ChamaNotification.account_id == member.id))
    ).scalar_one()
    assert notification.type == "payment_success"
    assert notification.title == "Payment Successful"
    assert notification.message == "KES 975.00 added via M-Pesa/Airtel Money"
    assert notification.data["amount_cents"] == 97500

    fee = (await db_session.execute(select(PlatformFee))).scalar_one()
    assert fee.amount_cents == 2500
    assert fee.fee_type == "transaction"
    assert fee.payment_reference == "CHP_TOPUP1"
    assert fee.source_transaction_id == "txn-42"

    assert await _log_status(db_session, "CHP_TOPUP1") == [LOG_COMPLETED]


async def test_replayed_success_is_a_noop(db_session, service, make_account):
    member = await make_account("otieno")
    await _pending(db_session, member, "CHP_REPLAY")
    event = _event("charge.success", "CHP_REPLAY", amount=50000, channel="card")

    first = await service.process_event(event)
    await db_session.commit()
    second = await service.process_event(event)
    await db_session.commit()

    assert first.status == LOG_COMPLETED
    assert second.status == LOG_DUPLICATE
    wallet = await WalletService.with_session(db_session).ensure_wallet(member.id)
    assert wallet.balance_cents == 48750
    assert await _count(db_session, WalletTransaction, WalletTransaction.reference == "CHP_REPLAY") == 1
    assert await _count(db_session, PlatformFee) == 1
    assert await _count(db_session, ChamaNotification, ChamaNotification.account_id == member.id) == 1
    assert sorted(await _log_status(db_session, "CHP_REPLAY")) == sorted([LOG_COMPLETED, LOG_DUPLICATE])


async def test_unknown_reference_is_logged_and_acknowledged(db_session, service):
    outcome = await service.process_event(_event("charge.success", "CHP_MISSING"))
    await db_session.commit()

    assert outcome.status == LOG_FAILED
    assert outcome.detail == "Transaction not found"
    entry = (await db_session.execute(select(PaystackWebhook))).scalar_one()
    assert entry.status == LOG_FAILED
    assert entry.error_message == "Transaction not found"
    assert entry.processed_at is not None
    assert await _count(db_session, PlatformFee) == 0


async def test_chama_purchase_grants_ownership(db_session, service, make_account):
    buyer = await make_account("achieng")
    chamas = ChamaService.with_session(db_session)
    chama = await chamas.create_chama(name="Umoja Savers", sale_price_cents=500000)
    purchase = await chamas.repository.create_purchase(
        chama_id=chama.id, buyer_id=buyer.id, expected_amount_cents=500000
    )
    await _pending(db_session, buyer, "CHP_CHAMA1", amount_cents=500000, purpose="chama_purchase", chama_id=chama.id)

    outcome = await service.process_event(_event("charge.success", "CHP_CHAMA1", amount=500000, channel="card"))
    await db_session.commit()

    assert outcome.status == LOG_COMPLETED
    owned = await chamas.get_chama(chama.id)
    assert owned.purchased_by == buyer.id
    assert owned.purchase_amount_cents == 500000
    assert owned.purchased_at == "2026-10-16T09:15:00.000Z"
    assert owned.total_savings_cents == 0

    members = await chamas.list_members(chama.id)
    assert [(m.account_id, m.role) for m in members] == [(buyer.id, "admin")]

    record = (
        await db_session.execute(
            select(PendingChamaPurchase)
            .where(PendingChamaPurchase.id == purchase.id)
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert record.payment_status == "verified"
    assert record.ownership_granted is True
    assert record.amount_paid_cents == 500000
    assert record.paystack_reference == "CHP_CHAMA1"

    notification = (
        await db_session.execute(select(ChamaNotification).where(ChamaNotification.account_id == buyer.id))
    ).scalar_one()
    assert notification.type == "chama_purchased"
    assert notification.message.startswith("You now own Umoja Savers!")

    # chama purchases do not land in the wallet
    assert await _count(db_session, WalletTransaction, WalletTransaction.reference == "CHP_CHAMA1") == 0
    fee = (await db_session.execute(select(PlatformFee))).scalar_one()
    assert fee.amount_cents == 12500


async def test_chama_purchase_amount_mismatch_fails_purchase(db_session, service, make_account):
    buyer = await make_account("kamau")
    chamas = ChamaService.with_session(db_session)
    chama = await chamas.create_chama(name="Harambee", sale_price_cents=500000)
    purchase = await chamas.repository.create_purchase(
        chama_id=chama.id, buyer_id=buyer.id, expected_amount_cents=500000
    )
    await _pending(db_session, buyer, "CHP_CHAMA2", amount_cents=500000, purpose="chama_purchase", chama_id=chama.id)

    await service.process_event(_event("charge.success", "CHP_CHAMA2", amount=400000))
    await db_session.commit()

    assert (await chamas.get_chama(chama.id)).purchased_by is None
    assert await _count(db_session, ChamaMember, ChamaMember.chama_id == chama.id) == 0
    record = (
        await db_session.execute(
            select(PendingChamaPurchase)
            .where(PendingChamaPurchase.id == purchase.id)
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert record.payment_status == "failed"
    assert record.meta == {"error": "Amount mismatch", "expected_cents": 500000, "paid_cents": 400000}

    notification = (
        await db_session.execute(select(ChamaNotification).where(ChamaNotification.account_id == buyer.id))
    ).scalar_one()
    assert notification.type == "payment_failed"
    assert notification.title == "Chama Purchase Failed"
    assert notification.message == (
        "Payment amount mismatch. Expected KES 5000.00, received KES 4000.00. Please contact support."
    )


async def _purchase_status(db_session, purchase_id):
    return (
        await db_session.execute(
            select(PendingChamaPurchase)
            .where(PendingChamaPurchase.id == purchase_id)
            .execution_options(populate_existing=True)
        )
    ).scalar_one()


async def test_first_paid_buyer_keeps_chama(db_session, service, make_account):
    first = await make_account("alpha")
    second = await make_account("beta")
    chamas = ChamaService.with_session(db_session)
    chama = await chamas.create_chama(name="Pamoja", sale_price_cents=300000)
    first_purchase = await chamas.repository.create_purchase(
        chama_id=chama.id, buyer_id=first.id, expected_amount_cents=300000
    )
    second_purchase = await chamas.repository.create_purchase(
        chama_id=chama.id, buyer_id=second.id, expected_amount_cents=300000
    )
    await _pending(db_session, first, "CHP_A", amount_cents=300000, purpose="chama_purchase", chama_id=chama.id)
    await _pending(db_session, second, "CHP_B", amount_cents=300000, purpose="chama_purchase", chama_id=chama.id)

    await service.process_event(_event("charge.success", "CHP_A", amount=300000))
    await db_session.commit()
    # the competing checkout is closed as soon as the first buyer wins
    closed = await _purchase_status(db_session, second_purchase.id)
    assert closed.payment_status == "failed"
    assert closed.meta == {"error": "Chama already purchased"}

    outcome = await service.process_event(_event("charge.success", "CHP_B", amount=300000))
    await db_session.commit()

    assert outcome.status == LOG_COMPLETED
    owned = await chamas.get_chama(chama.id)
    assert owned.purchased_by == first.id
    members = await chamas.list_members(chama.id)
    assert [(m.account_id, m.role) for m in members] == [(first.id, "admin")]
    assert (await _purchase_status(db_session, first_purchase.id)).payment_status == "verified"

    notification = (
        await db_session.execute(select(ChamaNotification).where(ChamaNotification.account_id == second.id))
    ).scalar_one()
    assert notification.type == "payment_failed"
    assert notification.title == "Chama Purchase Failed"
    assert notification.message.startswith("Pamoja was bought by another member")
    assert await _count(db_session, WalletTransaction, WalletTransaction.reference == "CHP_B") == 0


async def test_pending_purchase_of_owned_chama_is_failed(db_session, service, make_account):
    owner = await make_account("wanjiru")
    latecomer = await make_account("otieno")
    chamas = ChamaService.with_session(db_session)
    chama = await chamas.create_chama(name="Tujenge", sale_price_cents=200000)
    purchase = await chamas.repository.create_purchase(
        chama_id=chama.id, buyer_id=latecomer.id, expected_amount_cents=200000
    )
    await chamas.repository.update_chama(chama.id, purchased_by=owner.id, purchase_amount_cents=200000)
    await _pending(db_session, latecomer, "CHP_LATE", amount_cents=200000, purpose="chama_purchase", chama_id=chama.id)

    outcome = await service.process_event(_event("charge.success", "CHP_LATE", amount=200000))
    await db_session.commit()

    assert outcome.status == LOG_COMPLETED
    assert (await chamas.get_chama(chama.id)).purchased_by == owner.id
    assert await _count(db_session, ChamaMember, ChamaMember.chama_id == chama.id) == 0
    record = await _purchase_status(db_session, purchase.id)
    assert record.payment_status == "failed"
    assert record.ownership_granted is False
    assert record.meta == {"error": "Chama already purchased"}
    notification = (
        await db_session.execute(select(ChamaNotification).where(ChamaNotification.account_id == latecomer.id))
    ).scalar_one()
    assert notification.type == "payment_failed"
    assert notification.data["reason"] == "Chama already purchased"


async def test_chama_payment_without_pending_purchase_only_settles(db_session, service, make_account):
    buyer = await make_account("muthoni")
    chamas = ChamaService.with_session(db_session)
    chama = await chamas.create_chama(name="Jamii", sale_price_cents=100000)
    await _pending(db_session, buyer, "CHP_ORPHAN", amount_cents=100000, purpose="chama_purchase", chama_id=chama.id)

    outcome = await service.process_event(_event("charge.success", "CHP_ORPHAN", amount=100000))
    await db_session.commit()

    assert outcome.status == LOG_COMPLETED
    tx = (
        await db_session.execute(
            select(PaymentTransaction)
            .where(PaymentTransaction.reference == "CHP_ORPHAN")
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert tx.status == "success"
    assert (await chamas.get_chama(chama.id)).purchased_by is None
    assert await _count(db_session, ChamaMember, ChamaMember.chama_id == chama.id) == 0
    assert await _count(db_session, WalletTransaction, WalletTransaction.reference == "CHP_ORPHAN") == 0
    assert await _count(db_session, ChamaNotification, ChamaNotification.account_id == buyer.id) == 0
    fee = (await db_session.execute(select(PlatformFee))).scalar_one()
    assert fee.amount_cents == 2500


@pytest.mark.parametrize("reference", ["CHP_NOWHERE", None])
async def test_failed_charge_without_transaction_is_logged(db_session, service, reference):
    outcome = await service.process_event(_event("charge.failed", reference, gateway_response="Declined"))
    await db_session.commit()

    assert outcome.status == LOG_FAILED
    assert outcome.detail == ("Transaction not found" if reference else "Missing reference")
    entry = (await db_session.execute(select(PaystackWebhook))).scalar_one()
    assert entry.status == LOG_FAILED
    assert entry.processed_at is not None
    assert await _count(db_session, ChamaNotification) == 0


async def test_charge_failed_reports_available_balance(db_session, service, make_account):
    member = await make_account("njeri")
    await _pending(db_session, member, "CHP_FAIL1", amount_cents=100000)

    outcome = await service.process_event(
        _event(
            "charge.failed",
            "CHP_FAIL1",
            gateway_response="Insufficient funds. Your M-PESA balance is Ksh 35.00",
        )
    )
    await db_session.commit()

    assert outcome.status == LOG_COMPLETED
    tx = (
        await db_session.execute(
            select(PaymentTransaction)
            .where(PaymentTransaction.reference == "CHP_FAIL1")
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert tx.status == "failed"
    assert tx.result_code == 1
    assert tx.result_desc.splitlines() == [
        "Payment failed: Insufficient mobile money balance",
        "Available balance: KES 35.00",
        "Please top up your account or try a smaller amount.",
    ]
    assert tx.callback_data["available_balance_cents"] == 3500
    assert tx.callback_data["original_message"].startswith("Insufficient funds")

    notification = (
        await db_session.execute(select(ChamaNotification).where(ChamaNotification.account_id == member.id))
    ).scalar_one()
    assert notification.type == "payment_failed"
    assert notification.data["available_balance_cents"] == 3500
    assert notification.data["amount_cents"] == 100000
    assert await _count(db_session, PlatformFee) == 0


async def test_failure_after_success_is_ignored(db_session, service, make_account):
    member = await make_account("mutua")
    await _pending(db_session, member, "CHP_DONE")
    await service.process_event(_event("charge.success", "CHP_DONE"))
    await db_session.commit()

    outcome = await service.process_event(_event("charge.failed", "CHP_DONE", gateway_response="Declined"))
    await db_session.commit()

    assert outcome.status == LOG_DUPLICATE
    tx = (
        await db_session.execute(
            select(PaymentTransaction)
            .where(PaymentTransaction.reference == "CHP_DONE")
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert tx.status == "success"


async def test_success_after_failed_attempt_credits_wallet(db_session, service, make_account):
    member = await make_account("chebet")
    await _pending(db_session, member, "CHP_RETRY", amount_cents=20000)
    await service.process_event(_event("charge.failed", "CHP_RETRY", amount=20000, gateway_response="Timeout"))
    await db_session.commit()

    outcome = await service.process_event(_event("charge.success", "CHP_RETRY", amount=20000, channel="bank"))
    await db_session.commit()

    assert outcome.status == LOG_COMPLETED
    wallet = await WalletService.with_session(db_session).ensure_wallet(member.id)
    assert wallet.balance_cents == 19500


async def test_other_events_are_ignored(db_session, service):
    outcome = await service.process_event({"event": "transfer.success", "data": {"reference": "TRF_1"}})
    await db_session.commit()

    assert outcome.status == LOG_IGNORED
    assert await _log_status(db_session, "TRF_1") == [LOG_IGNORED]


def test_signature_is_required(service):
    body = b'{"event": "charge.success", "data": {}}'
    with pytest.raises(WebhookSignatureError):
        service.verify_signature(body, None)
    with pytest.raises(WebhookSignatureError):
        service.verify_signature(body, "0" * 128)
    service.verify_signature(body, sign_payload(PAYSTACK_SECRET, body))


def test_unsigned_webhooks_can_be_allowed(service):
    service.paystack.settings.allow_unsigned_webhooks = True
    service.verify_signature(b"{}", None)
    with pytest.raises(WebhookSignatureError):
        service.verify_signature(b"{}", "deadbeef")


@pytest.mark.parametrize(
    "body",
    [b"not json", b"[]", b'{"data": {}}', b'{"event": "charge.success", "data": "x"}'],
)
def test_malformed_bodies_are_rejected(body):
    with pytest.raises(WebhookPayloadError):
        PaystackWebhookService.parse_event(body)
