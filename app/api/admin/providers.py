from fastapi import APIRouter

from app.api.deps import CurrentUser, EmailProviders, PaymentProviders, ShippingProviders

router = APIRouter()


@router.get("")
async def list_providers(
    current_user: CurrentUser,
    email_providers: EmailProviders,
    payment_providers: PaymentProviders,
    shipping_providers: ShippingProviders,
):
    """Registered integrations per kind, whether each is configured, and the active default."""
    return {
        "email": email_providers.describe(),
        "payment": payment_providers.describe(),
        "shipping": shipping_providers.describe(),
    }
