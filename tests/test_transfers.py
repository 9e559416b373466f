"""Send money: member wallets and external checkouts."""

import pytest
from sqlalchemy import select

from chamapay.db.models import ChamaNotification, PaymentTransaction, WalletTransaction
from chamapay.modules.transfers import (
    ExternalTransferRequest,
    RecipientNotFoundError,
    TransferService,
    TransferValidationError,
    is_valid_email,
    normalize_phone,
)
from chamapay.modules.wallets import InsufficientFundsError, WalletService

from .conftest import auth_headers


@pytest.fixture
def transfers(db_session, paystack_client):
    return TransferService.with_session(db_session, paystack_client)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("amina@example.com", True),
        ("amina@example", False),
        ("amina example@mail.com", False),
        ("@example.com", False),
        ("", False),
    ],
)
def test_email_shape(value, expected):
    assert is_valid_email(value) is expected


def test_normalize_phone():
    assert normalize_phone("+254 712 345 678") == "254712345678"
    assert normalize_phone("0712345678") == "0712345678"


async def test_check_recipient(transfers, make_account):
    await make_account("halima", email="Halima@Example.com", full_name="Halima Yusuf")

    member = await transfers.check_recipient("halima@example.COM")
    stranger = await transfers.check_recipient("nobody@example.com")

    assert member.is_member is True
    assert member.display_name == "Halima Yusuf"
    assert member.transfer_kind == "internal"
    assert stranger.is_member is False
    assert stranger.transfer_kind == "external"


async def test_transfer_moves_funds_and_notifies_both(db_session, transfers, make_account):
    sender = await make_account("baraka", balance_cents=50000)
    recipient = await make_account("imani")

    result = await transfers.transfer_to_member(
        sender=sender,
        recipient_email="IMANI@example.com",
        amount_cents=12000,
        description="Lunch",
    )
    await db_session.commit()

    assert result.sender_balance_cents == 38000
    assert result.recipient_id == recipient.id
    wallets = WalletService.with_session(db_session)
    assert (await wallets.ensure_wallet(recipient.id)).balance_cents == 12000

    rows = (
        await db_session.execute(
            select(WalletTransaction).where(WalletTransaction.type.in_(["transfer_in", "transfer_out"]))
        )
    ).scalars().all()
    by_type = {row.type: row for row in rows}
    assert by_type["transfer_out"].amount_cents == -12000
    assert by_type["transfer_out"].counterparty_id == recipient.id
    assert by_type["transfer_in"].amount_cents == 12000
    assert by_type["transfer_in"].counterparty_id == sender.id
    assert by_type["transfer_in"].description == "Lunch"

    notifications = (await db_session.execute(select(ChamaNotification))).scalars().all()
    assert {(n.account_id, n.type) for n in notifications} == {
        (sender.id, "money_sent"),
        (recipient.id, "money_received"),
    }


async def test_transfer_rejects_overdraft(db_session, transfers, make_account):
    sender = await make_account("juma", balance_cents=1000)
    await make_account("zawadi")

    with pytest.raises(InsufficientFundsError) as excinfo:
        await transfers.transfer_to_member(sender=sender, recipient_email="zawadi@example.com", amount_cents=1001)

    assert excinfo.value.balance_cents == 1000
    assert excinfo.value.requested_cents == 1001
    await db_session.rollback()
    assert (await WalletService.with_session(db_session).ensure_wallet(sender.id)).balance_cents == 1000


@pytest.mark.parametrize(
    "email, amount, description",
    [
        ("not-an-email", 100, None),
        ("zawadi@example.com", 0, None),
        ("zawadi@example.com", -5, None),
        ("zawadi@example.com", 100, "x" * 201),
    ],
)
async def test_transfer_validation(transfers, make_account, email, amount, description):
    sender = await make_account("juma", balance_cents=1000)
    await make_account("zawadi")

    with pytest.raises(TransferValidationError):
        await transfers.transfer_to_member(
            sender=sender, recipient_email=email, amount_cents=amount, description=description
        )


async def test_transfer_to_self_or_stranger(transfers, make_account):
    sender = await make_account("pendo", balance_cents=1000)

    with pytest.raises(TransferValidationError):
        await transfers.transfer_to_member(sender=sender, recipient_email="pendo@example.com", amount_cents=100)
    with pytest.raises(RecipientNotFoundError):
        await transfers.transfer_to_member(sender=sender, recipient_email="ghost@example.com", amount_cents=100)


async def test_external_mobile_money_checkout(db_session, transfers, make_account, fake_paystack):
    sender = await make_account("akinyi")

    checkout = await transfers.start_external_transfer(
        sender=sender,
        request=ExternalTransferRequest(
            payment_method="mpesa",
            amount_cents=150000,
            email="akinyi@example.com",
            recipient_phone="+254 712 345 678",
            description="Rent share",
        ),
    )
    await db_session.commit()

    sent = fake_paystack.last_json()
    assert sent["channels"] == ["mobile_money"]
    assert sent["amount"] == 150000
    assert sent["currency"] == "KES"
    assert sent["metadata"]["purpose"] == "other"
    assert sent["metadata"]["payment_type"] == "send_money"
    assert sent["metadata"]["recipient"] == "254712345678"
    assert sent["metadata"]["notes"] == "Rent share"
    assert sent["metadata"]["description"] == "Send money to 254712345678"

    tx = (
        await db_session.execute(select(PaymentTransaction).where(PaymentTransaction.reference == checkout.reference))
    ).scalar_one()
    assert tx.status == "pending"
    assert tx.purpose == "other"
    assert tx.phone_number == "254712345678"
    assert tx.payment_method == "mpesa"


async def test_external_card_checkout_without_phone(transfers, make_account, fake_paystack):
    sender = await make_account("odhiambo")

    checkout = await transfers.start_external_transfer(
        sender=sender,
        request=ExternalTransferRequest(
            payment_method="card_bank",
            amount_cents=5000,
            email="odhiambo@example.com",
            recipient="Mama Mboga",
        ),
    )

    sent = fake_paystack.last_json()
    assert sent["channels"] == ["card", "bank", "ussd", "bank_transfer"]
    assert sent["metadata"]["recipient"] == "Mama Mboga"
    assert "notes" not in sent["metadata"]
    assert checkout.authorization_url.endswith(checkout.reference)


@pytest.mark.parametrize(
    "method, phone, email",
    [
        ("mpesa", None, "a@example.com"),
        ("airtel", "12345", "a@example.com"),
        ("airtel", "1234567890123456", "a@example.com"),
        ("mpesa", "0712345678", ""),
        ("paypal", "0712345678", "a@example.com"),
    ],
)
async def test_external_transfer_validation(transfers, make_account, fake_paystack, method, phone, email):
    sender = await make_account("wekesa")

    with pytest.raises(TransferValidationError):
        await transfers.start_external_transfer(
            sender=sender,
            request=ExternalTransferRequest(
                payment_method=method, amount_cents=1000, email=email, recipient_phone=phone
            ),
        )
    assert fake_paystack.requests == []


async def test_wallet_transfer_endpoint(client, make_account):
    sender = await make_account("mwangi", balance_cents=30000)
    await make_account("nyambura")

    check = await client.get(
        "/api/transfers/recipient", params={"email": "nyambura@example.com"}, headers=auth_headers(sender)
    )
    assert check.status_code == 200
    assert check.json()["transfer_kind"] == "internal"

    response = await client.post(
        "/api/transfers/wallet",
        json={"recipient_email": "nyambura@example.com", "amount_cents": 10000, "description": "Chai"},
        headers=auth_headers(sender),
    )
    assert response.status_code == 200
    assert response.json()["sender_balance_cents"] == 20000

    overdraft = await client.post(
        "/api/transfers/wallet",
        json={"recipient_email": "nyambura@example.com", "amount_cents": 999999},
        headers=auth_headers(sender),
    )
    assert overdraft.status_code == 400

    missing = await client.post(
        "/api/transfers/wallet",
        json={"recipient_email": "ghost@example.com", "amount_cents": 100},
        headers=auth_headers(sender),
    )
    assert missing.status_code == 404


async def test_external_transfer_endpoint(client, make_account, fake_paystack):
    sender = await make_account("auma")

    response = await client.post(
        "/api/transfers/external",
        json={"payment_method": "airtel", "amount_cents": 2500, "recipient_phone": "0733123456"},
        headers=auth_headers(sender),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["purpose"] == "other"
    assert body["authorization_url"].startswith("https://checkout.paystack.com/")
    assert fake_paystack.last_json()["email"] == "auma@example.com"
