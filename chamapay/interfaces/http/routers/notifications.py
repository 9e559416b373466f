"""Notification inbox endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.core.security import get_current_account
from chamapay.interfaces.http.deps import get_db_session
from chamapay.modules.accounts import Account
from chamapay.modules.notifications import NotificationService
from chamapay.schemas import NotificationListResponse, NotificationResponse

router = APIRouter()


@router.get("", response_model=NotificationListResponse, summary="Notifications, newest first")
async def list_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
):
    notifications = await NotificationService.with_session(db).list_notifications(
        account.id, unread_only=unread_only, limit=limit, offset=offset
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(item) for item in notifications]
    )


@router.post("/{notification_id}/read", response_model=NotificationResponse, summary="Mark a notification read")
async def mark_read(
    notification_id: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
):
    notification = await NotificationService.with_session(db).mark_read(notification_id, account.id)
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    await db.commit()
    return NotificationResponse.model_validate(notification)
