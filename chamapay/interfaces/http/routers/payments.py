"""Checkout initialisation and status endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.core.security import get_current_account
from chamapay.infrastructure.paystack import PaystackClient, PaystackError
from chamapay.interfaces.http.deps import get_db_session, get_paystack_client
from chamapay.modules.accounts import Account
from chamapay.modules.payments import PaymentNotFoundError, PaymentService, PaymentValidationError
from chamapay.schemas import CheckoutResponse, PaymentInitializeRequest, PaymentStatusResponse

router = APIRouter()


@router.post("/initialize", response_model=CheckoutResponse, summary="Start a Paystack checkout")
async def initialize_payment(
    payload: PaymentInitializeRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    service = PaymentService.with_session(db, paystack)
    try:
        checkout = await service.initialize_payment(
            account=account,
            email=payload.email or account.email,
            amount_cents=payload.amount_cents,
            purpose=payload.purpose,
            description=payload.description,
            phone_number=payload.phone_number,
            metadata=payload.metadata,
        )
    except PaymentValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PaystackError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc

    await db.commit()
    return CheckoutResponse.model_validate(checkout)


@router.get("/{reference}", response_model=PaymentStatusResponse, summary="Payment status for the checkout return page")
async def get_payment_status(
    reference: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    service = PaymentService.with_session(db, paystack)
    try:
        record = await service.get_status(reference, account.id)
    except PaymentNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found") from exc
    return PaymentStatusResponse.model_validate(record)
