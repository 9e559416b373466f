"""Registration and login endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.core.security import create_access_token, get_current_account
from chamapay.interfaces.http.deps import get_account_service, get_db_session
from chamapay.modules.accounts import (
    Account,
    AccountAlreadyExistsError,
    AccountCreateInput,
    AccountService,
)
from chamapay.modules.wallets import WalletService
from chamapay.schemas import AccountResponse, AuthResponse, LoginRequest, RegisterRequest

router = APIRouter()


def _auth_response(account: Account) -> AuthResponse:
    access_token = create_access_token(account.id, account.username, account.role)
    return AuthResponse(access_token=access_token, account=AccountResponse.model_validate(account))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED, summary="Register an account")
async def register(
    payload: RegisterRequest,
    account_service: AccountService = Depends(get_account_service),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        account = await account_service.create_account(
            AccountCreateInput(
                username=payload.username,
                email=payload.email,
                password=payload.password,
                full_name=payload.full_name,
            )
        )
    except AccountAlreadyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    await WalletService.with_session(db).ensure_wallet(account.id)
    await db.commit()
    return _auth_response(account)


@router.post("/login", response_model=AuthResponse, summary="Log in with username or email")
async def login(
    payload: LoginRequest,
    account_service: AccountService = Depends(get_account_service),
    db: AsyncSession = Depends(get_db_session),
):
    account = await account_service.authenticate(payload.login, payload.password)
    if not account:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    await account_service.set_last_login(account.id)
    await db.commit()
    return _auth_response(account)


@router.get("/me", response_model=AccountResponse, summary="Current account")
async def me(account: Account = Depends(get_current_account)):
    return AccountResponse.model_validate(account)
