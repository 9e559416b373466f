"""Inbound Paystack webhook endpoint."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from chamapay.core.config import get_settings
from chamapay.infrastructure.paystack import PaystackClient
from chamapay.interfaces.http.deps import get_db_session, get_paystack_client
from chamapay.modules.webhooks import PaystackWebhookService, WebhookPayloadError, WebhookSignatureError
from chamapay.schemas import WebhookAck

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/paystack", response_model=WebhookAck, summary="Paystack charge events")
async def paystack_webhook(
    request: Request,
    x_paystack_signature: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db_session),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    body = await request.body()
    service = PaystackWebhookService.with_session(db, paystack, get_settings().platform_fee_rate)
    try:
        outcome = await service.handle(body, x_paystack_signature)
    except WebhookSignatureError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    except WebhookPayloadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        # Paystack retries on non-2xx; the terminal-status check makes the retry safe
        logger.exception("Webhook processing failed")
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Webhook processing failed") from exc

    await db.commit()
    logger.info("Webhook %s for %s handled: %s", outcome.event, outcome.reference, outcome.status)
    return WebhookAck(status=outcome.status, reference=outcome.reference)
