"""Send-money endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.core.security import get_current_account
from chamapay.infrastructure.paystack import PaystackClient, PaystackError
from chamapay.interfaces.http.deps import get_db_session, get_paystack_client
from chamapay.modules.accounts import Account
from chamapay.modules.payments import PaymentValidationError
from chamapay.modules.transfers import (
    ExternalTransferRequest,
    RecipientNotFoundError,
    TransferService,
    TransferValidationError,
)
from chamapay.modules.wallets import InsufficientFundsError
from chamapay.schemas import (
    CheckoutResponse,
    ExternalTransferRequest as ExternalTransferPayload,
    RecipientCheckResponse,
    WalletTransferRequest,
    WalletTransferResponse,
)

router = APIRouter()


@router.get("/recipient", response_model=RecipientCheckResponse, summary="Is the address a member?")
async def check_recipient(
    email: str = Query(..., min_length=3),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    result = await TransferService.with_session(db, paystack).check_recipient(email)
    return RecipientCheckResponse.model_validate(result)


@router.post("/wallet", response_model=WalletTransferResponse, summary="Send money to a member's wallet")
async def transfer_to_member(
    payload: WalletTransferRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    service = TransferService.with_session(db, paystack)
    try:
        result = await service.transfer_to_member(
            sender=account,
            recipient_email=payload.recipient_email,
            amount_cents=payload.amount_cents,
            description=payload.description,
        )
    except TransferValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RecipientNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except InsufficientFundsError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    await db.commit()
    return WalletTransferResponse.model_validate(result)


@router.post("/external", response_model=CheckoutResponse, summary="Send money through a Paystack checkout")
async def start_external_transfer(
    payload: ExternalTransferPayload,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    service = TransferService.with_session(db, paystack)
    try:
        checkout = await service.start_external_transfer(
            sender=account,
            request=ExternalTransferRequest(
                payment_method=payload.payment_method,
                amount_cents=payload.amount_cents,
                email=payload.email or account.email,
                recipient_phone=payload.recipient_phone,
                recipient=payload.recipient,
                description=payload.description,
            ),
        )
    except (TransferValidationError, PaymentValidationError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PaystackError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc

    await db.commit()
    return CheckoutResponse.model_validate(checkout)
