from fastapi import APIRouter, status
import logging

from app.api.deps import DbSession, PaymentProviders
from app.config import settings
from app.exceptions import ValidationError
from app.schemas.order import CheckoutRequest, CheckoutResponse, OrderResponse
from app.schemas.payment import PaymentCustomer, PaymentLineItem, PaymentRequest
from app.services.orders import create_order, load_order

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def checkout(request: CheckoutRequest, db: DbSession, payment_providers: PaymentProviders):
    """Place a guest order and start payment.

    The order is created even when payment cannot be started; the reason is
    returned in ``paymentError`` so the storefront can offer a retry.
    """
    if request.payment_provider and request.payment_provider not in payment_providers:
        raise ValidationError(f"Unknown payment provider '{request.payment_provider}'")

    order = await create_order(db, request)
    provider = payment_providers.resolve(request.payment_provider)

    if provider is None or not provider.is_configured():
        logger.warning("Checkout without a configured payment provider", extra={"order_id": order.id})
        return CheckoutResponse(
            order=OrderResponse.model_validate(order),
            payment_error="No payment provider is configured",
        )

    site = settings.SITE_URL.rstrip("/")
    payment = await provider.initiate_payment(
        PaymentRequest(
            amount=order.total,
            order_id=str(order.id),
            order_number=order.order_number,
            customer=PaymentCustomer(
                name=order.customer_name,
                email=order.customer_email,
                phone=order.customer_phone,
            ),
            items=[
                PaymentLineItem(name=item.product_name, quantity=item.quantity, price=item.unit_price)
                for item in order.items
            ],
            return_url=f"{site}/checkout/success?order={order.order_number}",
            cancel_url=f"{site}/checkout/cancelled?order={order.order_number}",
            notify_url=f"{site}/api/webhooks/{provider.name}",
        )
    )

    if payment.success:
        order_id = order.id
        order.payment_provider = provider.name
        order.payment_reference = payment.payment_id
        await db.commit()
        order = await load_order(db, order_id)

    return CheckoutResponse(
        order=OrderResponse.model_validate(order),
        payment_url=payment.redirect_url,
        payment_error=payment.error,
    )
