from fastapi import APIRouter

from app.api.deps import ShippingProviders
from app.exceptions import ErrorCode, StoreException
from app.schemas.shipping import ShippingQuoteRequest, ShippingQuotesResponse
from app.services.shipping import pick_best_quote

router = APIRouter()


@router.post("/quote", response_model=ShippingQuotesResponse)
async def shipping_quote(request: ShippingQuoteRequest, shipping_providers: ShippingProviders):
    """Quotes from every courier that can carry the parcel, plus the cheapest."""
    quotes = await shipping_providers.get_all_quotes(request)
    if not quotes:
        raise StoreException(
            status_code=503,
            code=ErrorCode.SERVICE_UNAVAILABLE,
            detail="Unable to calculate shipping quote",
        )
    return ShippingQuotesResponse(quotes=quotes, best=pick_best_quote(quotes))
