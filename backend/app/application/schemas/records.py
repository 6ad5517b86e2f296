"""Pydantic DTOs (Data Transfer Objects) for module records."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class RecordCreate(BaseModel):
    """Schema for creating a record — ``fields`` holds the module's own values."""

    fields: dict[str, Any] = Field(
        ..., examples=[{"application_no": "APP-0001", "remarks": "Transfer request"}],
    )


class RecordUpdate(BaseModel):
    """Schema for updating a record — only the given fields change."""

    fields: dict[str, Any] = Field(default_factory=dict)


class RecordResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    module: str
    fields: dict[str, Any]
    derived: dict[str, Any] = Field(default_factory=dict)
    created_by: str | None
    updated_by: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PageMetaResponse(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    model_config = {"from_attributes": True}


class PageResultResponse(BaseModel):
    """One page of records with pagination metadata and the filtered-set summary."""

    records: list[RecordResponse]
    pagination: PageMetaResponse
    summary: dict[str, Any]

    model_config = {"from_attributes": True}


class PriceRequest(BaseModel):
    base_price: float = Field(..., ge=0, examples=[1500000])


class BulkPriceRequest(BaseModel):
    category_ids: list[str] = Field(..., min_length=1)
    base_price: float = Field(..., ge=0)


class PriceResponse(BaseModel):
    type: str
    value: float
    formatted_value: str
    surcharge_amount: float
    final_price: float
