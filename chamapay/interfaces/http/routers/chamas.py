"""Chama listing and purchase endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.core.security import get_current_account, get_current_admin
from chamapay.infrastructure.paystack import PaystackClient, PaystackError
from chamapay.interfaces.http.deps import get_db_session, get_paystack_client
from chamapay.modules.accounts import Account
from chamapay.modules.chamas import ChamaNotFoundError, ChamaService, ChamaUnavailableError
from chamapay.modules.payments import PaymentService, PaymentValidationError
from chamapay.schemas import (
    ChamaCreate,
    ChamaListResponse,
    ChamaMemberResponse,
    ChamaPurchaseRequest,
    ChamaPurchaseResponse,
    ChamaResponse,
    CheckoutResponse,
)

router = APIRouter()


@router.post("", response_model=ChamaResponse, status_code=status.HTTP_201_CREATED, summary="List a chama for sale")
async def create_chama(
    payload: ChamaCreate,
    admin: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    chama = await ChamaService.with_session(db).create_chama(
        name=payload.name,
        description=payload.description,
        sale_price_cents=payload.sale_price_cents,
        max_members=payload.max_members,
    )
    await db.commit()
    return ChamaResponse.model_validate(chama)


@router.get("", response_model=ChamaListResponse, summary="Browse chamas")
async def list_chamas(
    available_only: bool = False,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
):
    chamas = await ChamaService.with_session(db).list_chamas(
        available_only=available_only, limit=limit, offset=offset
    )
    return ChamaListResponse(chamas=[ChamaResponse.model_validate(chama) for chama in chamas])


@router.get("/{chama_id}/members", response_model=list[ChamaMemberResponse], summary="Chama members")
async def list_members(
    chama_id: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        members = await ChamaService.with_session(db).list_members(chama_id)
    except ChamaNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chama not found") from exc
    return [ChamaMemberResponse.model_validate(member) for member in members]


@router.post("/{chama_id}/purchase", response_model=ChamaPurchaseResponse, summary="Buy a chama")
async def purchase_chama(
    chama_id: str,
    payload: Optional[ChamaPurchaseRequest] = None,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    service = ChamaService.with_session(db)
    try:
        purchase, checkout = await service.start_purchase(
            chama_id=chama_id,
            buyer=account,
            email=(payload.email if payload else None) or account.email,
            payments=PaymentService.with_session(db, paystack),
        )
    except ChamaNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chama not found") from exc
    except (ChamaUnavailableError, PaymentValidationError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PaystackError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc

    await db.commit()
    return ChamaPurchaseResponse(
        purchase_id=purchase.id,
        chama_id=purchase.chama_id,
        expected_amount_cents=purchase.expected_amount_cents,
        checkout=CheckoutResponse.model_validate(checkout),
    )
