from .records import (
    BulkPriceRequest,
    PageMetaResponse,
    PageResultResponse,
    PriceRequest,
    PriceResponse,
    RecordCreate,
    RecordResponse,
    RecordUpdate,
)

__all__ = [
    "BulkPriceRequest",
    "PageMetaResponse",
    "PageResultResponse",
    "PriceRequest",
    "PriceResponse",
    "RecordCreate",
    "RecordResponse",
    "RecordUpdate",
]
