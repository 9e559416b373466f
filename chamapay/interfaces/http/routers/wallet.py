"""Wallet balance, ledger and provider sync endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.core.security import get_current_account, get_current_admin
from chamapay.infrastructure.paystack import PaystackClient, PaystackError
from chamapay.interfaces.http.deps import get_db_session, get_paystack_client
from chamapay.modules.accounts import Account, AccountService
from chamapay.modules.payments import BalanceSyncService
from chamapay.modules.wallets import WalletService
from chamapay.schemas import (
    BalanceSyncRequest,
    BalanceSyncResponse,
    WalletResponse,
    WalletTransactionListResponse,
    WalletTransactionResponse,
)

router = APIRouter()


@router.get("", response_model=WalletResponse, summary="Central wallet balance")
async def get_wallet(
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
):
    wallet = await WalletService.with_session(db).ensure_wallet(account.id)
    await db.commit()
    return WalletResponse.model_validate(wallet)


@router.get("/transactions", response_model=WalletTransactionListResponse, summary="Wallet ledger")
async def list_transactions(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
):
    records = await WalletService.with_session(db).list_transactions(account.id, limit=limit, offset=offset)
    return WalletTransactionListResponse(
        transactions=[WalletTransactionResponse.model_validate(record) for record in records]
    )


@router.post("/sync", response_model=BalanceSyncResponse, summary="Mirror the Paystack balance into a wallet")
async def sync_balance(
    payload: Optional[BalanceSyncRequest] = None,
    admin: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    target_id = (payload.account_id if payload else None) or admin.id
    if target_id != admin.id and await AccountService.with_session(db).get_by_id(target_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")

    service = BalanceSyncService.with_session(db, paystack)
    try:
        result = await service.sync(target_id, performed_by=admin.id)
    except PaystackError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    await db.commit()
    return BalanceSyncResponse.model_validate(result)
