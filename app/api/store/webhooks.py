"""Payment provider notifications."""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
import logging

from app.api.deps import DbSession, PaymentProviders
from app.exceptions import BusinessRuleError, ErrorCode, StoreException
from app.services.orders import apply_payment_webhook

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/payfast", response_class=PlainTextResponse)
async def payfast_itn(request: Request, db: DbSession, payment_providers: PaymentProviders):
    """PayFast ITN. Form-encoded; PayFast expects a bare 200 "OK"."""
    provider = payment_providers.get_provider("payfast")
    if provider is None or not provider.is_configured():
        raise StoreException(
            status_code=503,
            code=ErrorCode.SERVICE_UNAVAILABLE,
            detail="PayFast not configured",
        )

    form = await request.form()
    data = {key: str(value) for key, value in form.items()}

    result = await provider.process_webhook(data)
    if not result.success:
        raise BusinessRuleError(result.error or "Invalid payment notification")

    logger.info(
        "PayFast ITN received",
        extra={"order_id": result.order_id, "payment_id": result.payment_id, "status": result.status},
    )
    await apply_payment_webhook(db, result, provider.name)
    return PlainTextResponse("OK")
