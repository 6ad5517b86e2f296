"""Module record endpoints — list with filters and summary, plus CRUD.

Every module (applications, defaulters, ...) is served by the same routes;
the ``{module}`` path segment selects its configuration and table.
"""

from fastapi import APIRouter, Depends, Header, Query, Request, status

from app.application.schemas.records import (
    PageResultResponse,
    RecordCreate,
    RecordResponse,
    RecordUpdate,
)
from app.application.services import RecordService
from app.domain.entities import QueryParams
from app.infrastructure.dependencies import get_record_service
from app.presentation.api.v1.errors import domain_errors

router = APIRouter(tags=["Records"])

_PAGING_PARAMS = frozenset({"page", "limit", "search", "sort_by", "sort_order"})


def _filters_from(request: Request) -> dict[str, str | list[str]]:
    """Every non-paging query parameter is a filter candidate; repeats become lists."""
    filters: dict[str, str | list[str]] = {}
    for key in request.query_params.keys():
        if key in _PAGING_PARAMS:
            continue
        values = request.query_params.getlist(key)
        filters[key] = values if len(values) > 1 else values[0]
    return filters


@router.get("/{module}", response_model=PageResultResponse)
async def list_records(
    request: Request,
    page: str | None = Query(None, description="1-based page number"),
    limit: str | None = Query(None, description="Page size, capped by the server"),
    search: str | None = Query(None, description="Case-insensitive text search"),
    sort_by: str | None = Query(None),
    sort_order: str | None = Query(None, description="asc or desc"),
    service: RecordService = Depends(get_record_service),
) -> PageResultResponse:
    """Filtered, sorted, paginated records with a summary of the whole filtered set."""
    params = QueryParams(
        page=page,
        limit=limit,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        filters=_filters_from(request),
    )
    with domain_errors():
        result = await service.list_records(params)
    return PageResultResponse.model_validate(result, from_attributes=True)


@router.get("/{module}/{record_id}", response_model=RecordResponse)
async def get_record(
    record_id: str,
    service: RecordService = Depends(get_record_service),
) -> RecordResponse:
    with domain_errors():
        record = await service.get_record(record_id)
    return RecordResponse.model_validate(record, from_attributes=True)


@router.post("/{module}", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    data: RecordCreate,
    x_user_id: str | None = Header(None, description="Acting staff user id"),
    service: RecordService = Depends(get_record_service),
) -> RecordResponse:
    with domain_errors():
        record = await service.create_record(data.fields, x_user_id)
    return RecordResponse.model_validate(record, from_attributes=True)


@router.put("/{module}/{record_id}", response_model=RecordResponse)
async def update_record(
    record_id: str,
    data: RecordUpdate,
    x_user_id: str | None = Header(None, description="Acting staff user id"),
    service: RecordService = Depends(get_record_service),
) -> RecordResponse:
    """Merge the given fields into an existing record."""
    with domain_errors():
        record = await service.update_record(record_id, data.fields, x_user_id)
    return RecordResponse.model_validate(record, from_attributes=True)


@router.delete("/{module}/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    record_id: str,
    x_user_id: str | None = Header(None, description="Acting staff user id"),
    service: RecordService = Depends(get_record_service),
) -> None:
    """Soft delete — the record is kept but no longer listed or retrievable."""
    with domain_errors():
        await service.delete_record(record_id, x_user_id)
