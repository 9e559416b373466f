from fastapi import APIRouter

from . import auth, chamas, notifications, payments, transfers, wallet, webhooks


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, prefix="/auth", tags=["auth"])
    router.include_router(wallet.router, prefix="/wallet", tags=["wallet"])
    router.include_router(payments.router, prefix="/payments", tags=["payments"])
    router.include_router(transfers.router, prefix="/transfers", tags=["transfers"])
    router.include_router(chamas.router, prefix="/chamas", tags=["chamas"])
    router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
    router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
    return router


__all__ = [
    "create_api_router",
]
