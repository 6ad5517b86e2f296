"""Plot pricing — applies a plot category's surcharge to a base price."""

from typing import Any

from app.application.services.record_service import RecordService
from app.domain.derivations import price_with_surcharge
from app.domain.entities import Record
from app.domain.exceptions import EntityNotFoundError, InvalidArgumentError


class PlotPricingService:
    """Prices plots against active plot categories."""

    def __init__(self, categories: RecordService):
        self._categories = categories

    async def price(self, category_id: str, base_price: float) -> dict[str, Any]:
        _check_base_price(base_price)
        category = await self._active_category(category_id)
        return price_with_surcharge(category.fields, base_price)

    async def bulk_price(self, category_ids: list[str], base_price: float) -> dict[str, Any]:
        """Price against several categories; missing or inactive ones are left out."""
        _check_base_price(base_price)
        results: dict[str, Any] = {}
        for category_id in dict.fromkeys(category_ids):
            try:
                category = await self._active_category(category_id)
            except EntityNotFoundError:
                continue
            results[category_id] = price_with_surcharge(category.fields, base_price)
        return results

    async def _active_category(self, category_id: str) -> Record:
        category = await self._categories.get_record(category_id)
        if not category.fields.get("is_active", False):
            raise EntityNotFoundError("PlotCategory", category_id)
        return category


def _check_base_price(base_price: float) -> None:
    if base_price < 0:
        raise InvalidArgumentError("base_price", "must not be negative")
