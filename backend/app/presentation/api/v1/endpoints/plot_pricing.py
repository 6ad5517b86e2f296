"""Plot pricing endpoints — apply a category surcharge to a base price."""

from fastapi import APIRouter, Depends

from app.application.schemas.records import BulkPriceRequest, PriceRequest, PriceResponse
from app.application.services import PlotPricingService
from app.infrastructure.dependencies import get_plot_pricing_service
from app.presentation.api.v1.errors import domain_errors

router = APIRouter(prefix="/plot_categories", tags=["Plot Pricing"])


@router.post("/bulk-price", response_model=dict[str, PriceResponse])
async def bulk_price(
    data: BulkPriceRequest,
    service: PlotPricingService = Depends(get_plot_pricing_service),
) -> dict[str, PriceResponse]:
    """Prices for each active category; unknown or inactive ids are omitted."""
    with domain_errors():
        prices = await service.bulk_price(data.category_ids, data.base_price)
    return {category_id: PriceResponse(**price) for category_id, price in prices.items()}


@router.post("/{category_id}/price", response_model=PriceResponse)
async def price(
    category_id: str,
    data: PriceRequest,
    service: PlotPricingService = Depends(get_plot_pricing_service),
) -> PriceResponse:
    with domain_errors():
        result = await service.price(category_id, data.base_price)
    return PriceResponse(**result)
