"""Payment Routes — payment provider webhook.

Invariants:
    - Always 200 for processed or duplicate deliveries
    - 400 when metadata.user_id is missing; 500 (via catch-all) on unexpected
      failures so the provider retries
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.config import get_settings
from kontekst.infrastructure.database import get_db
from kontekst.schemas.payment import PaymentWebhook, PaymentWebhookResponse
from kontekst.services.payments import handle_webhook

router = APIRouter(prefix="/api/v1/payments", tags=["payments"])


@router.post("/webhook", response_model=PaymentWebhookResponse)
async def payment_webhook(body: PaymentWebhook, db: AsyncSession = Depends(get_db)):
    return await handle_webhook(db, body, get_settings(), datetime.now(timezone.utc))
