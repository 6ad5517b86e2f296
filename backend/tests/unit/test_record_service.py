"""Unit tests for RecordService and PlotPricingService using in-memory fakes."""

import pytest

from app.application.services import FilterBuilder, PlotPricingService, QueryEngine, RecordService
from app.domain.entities import QueryParams, Record
from app.domain.exceptions import EntityNotFoundError, InvalidArgumentError
from app.domain.modules import APPLICATIONS, PLOT_CATEGORIES
from tests.fakes import FakeIdValidator, InMemoryRecordStore

USER = "id-user-1"
OTHER_USER = "id-user-2"


def _service(config, store: InMemoryRecordStore) -> RecordService:
    ids = FakeIdValidator()
    return RecordService(config, store, QueryEngine(FilterBuilder(ids)), ids)


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def service(store):
    return _service(APPLICATIONS, store)


@pytest.mark.asyncio
async def test_create_assigns_id_and_audit_fields(service, store):
    created = await service.create_record(
        {"application_no": "APP-001", "member_id": "id-m1"}, USER
    )

    assert created.id
    assert created.module == "applications"
    assert created.created_by == created.updated_by == USER
    assert created.created_at is not None
    assert created.is_deleted is False
    assert store.stored(created.id).fields["application_no"] == "APP-001"


@pytest.mark.asyncio
async def test_create_rejects_unknown_fields(service, store):
    with pytest.raises(InvalidArgumentError) as exc_info:
        await service.create_record({"application_no": "APP-001", "password": "x"}, USER)

    assert exc_info.value.field == "password"
    assert "insert" not in store.calls


@pytest.mark.asyncio
async def test_create_rejects_malformed_reference(service):
    with pytest.raises(InvalidArgumentError, match="plot_id"):
        await service.create_record({"application_no": "APP-001", "plot_id": "plot 7"}, USER)


@pytest.mark.asyncio
async def test_create_rejects_malformed_user_id(service):
    with pytest.raises(InvalidArgumentError, match="user_id"):
        await service.create_record({"application_no": "APP-001"}, "root")


@pytest.mark.asyncio
async def test_get_missing_record(service):
    with pytest.raises(EntityNotFoundError):
        await service.get_record("id-missing")


@pytest.mark.asyncio
async def test_get_malformed_id(service):
    with pytest.raises(InvalidArgumentError):
        await service.get_record("42")


@pytest.mark.asyncio
async def test_update_merges_fields_and_reassigns_updater(service):
    created = await service.create_record(
        {"application_no": "APP-001", "remarks": "first"}, USER
    )

    updated = await service.update_record(created.id, {"remarks": "second"}, OTHER_USER)

    assert updated.fields == {"application_no": "APP-001", "remarks": "second"}
    assert updated.created_by == USER
    assert updated.updated_by == OTHER_USER
    assert updated.updated_at >= created.updated_at


@pytest.mark.asyncio
async def test_delete_is_soft_and_hides_the_record(service, store):
    created = await service.create_record({"application_no": "APP-001"}, USER)

    assert await service.delete_record(created.id, OTHER_USER) is True

    stored = store.stored(created.id)
    assert stored.is_deleted is True
    assert stored.deleted_at is not None
    assert stored.updated_by == OTHER_USER
    with pytest.raises(EntityNotFoundError):
        await service.get_record(created.id)
    listing = await service.list_records(QueryParams())
    assert listing.records == []
    assert listing.summary["total_applications"] == 0


@pytest.mark.asyncio
async def test_deleting_twice_is_not_found(service):
    created = await service.create_record({"application_no": "APP-001"}, USER)
    await service.delete_record(created.id, USER)

    with pytest.raises(EntityNotFoundError):
        await service.delete_record(created.id, USER)


@pytest.mark.asyncio
async def test_list_groups_by_type(service):
    for n, type_id in enumerate(["id-t1", "id-t1", "id-t2"]):
        await service.create_record(
            {"application_no": f"APP-{n}", "application_type_id": type_id}, USER
        )

    result = await service.list_records(QueryParams())

    assert result.summary["total_applications"] == 3
    assert result.summary["recent_applications"] == 3
    assert result.summary["by_type"] == {"id-t1": 2, "id-t2": 1}


# ── Plot pricing ─────────────────────────────────────────────────────


def _category(record_id: str, **fields) -> Record:
    base = {
        "category_name": record_id,
        "surcharge_percentage": 0,
        "surcharge_fixed_amount": 0,
        "is_active": True,
    }
    base.update(fields)
    return Record(module="plot_categories", fields=base, id=record_id)


@pytest.fixture
def pricing():
    deleted = _category("id-deleted", surcharge_percentage=5)
    deleted.is_deleted = True
    store = InMemoryRecordStore([
        _category("id-corner", surcharge_percentage=10),
        _category("id-park", surcharge_fixed_amount=250000),
        _category("id-plain"),
        _category("id-retired", surcharge_percentage=5, is_active=False),
        deleted,
    ])
    return PlotPricingService(_service(PLOT_CATEGORIES, store))


@pytest.mark.asyncio
async def test_percentage_surcharge(pricing):
    price = await pricing.price("id-corner", 1_500_000)

    assert price == {
        "type": "percentage",
        "value": 10,
        "formatted_value": "10%",
        "surcharge_amount": 150000.0,
        "final_price": 1650000.0,
    }


@pytest.mark.asyncio
async def test_fixed_surcharge(pricing):
    price = await pricing.price("id-park", 1_000_000)

    assert price["formatted_value"] == "PKR 250,000.00"
    assert price["final_price"] == 1250000.0


@pytest.mark.asyncio
async def test_no_surcharge(pricing):
    price = await pricing.price("id-plain", 800_000)

    assert price["type"] == "none"
    assert price["final_price"] == 800000.0


@pytest.mark.asyncio
@pytest.mark.parametrize("category_id", ["id-retired", "id-deleted", "id-nope"])
async def test_inactive_deleted_or_missing_category(pricing, category_id):
    with pytest.raises(EntityNotFoundError):
        await pricing.price(category_id, 1_000_000)


@pytest.mark.asyncio
async def test_negative_base_price(pricing):
    with pytest.raises(InvalidArgumentError):
        await pricing.price("id-corner", -1)


@pytest.mark.asyncio
async def test_bulk_price_skips_unavailable_categories(pricing):
    prices = await pricing.bulk_price(["id-corner", "id-retired", "id-park", "id-corner"], 1_000_000)

    assert list(prices) == ["id-corner", "id-park"]
    assert prices["id-corner"]["final_price"] == 1100000.0


@pytest.mark.asyncio
async def test_category_cannot_have_both_surcharges():
    store = InMemoryRecordStore()
    categories = _service(PLOT_CATEGORIES, store)

    with pytest.raises(InvalidArgumentError, match="both percentage and fixed"):
        await categories.create_record(
            {"category_name": "Corner", "surcharge_percentage": 5, "surcharge_fixed_amount": 1000}, USER
        )
    assert "insert" not in store.calls


@pytest.mark.asyncio
async def test_update_cannot_add_a_second_surcharge():
    categories = _service(PLOT_CATEGORIES, InMemoryRecordStore())
    created = await categories.create_record({"category_name": "Corner", "surcharge_percentage": 5}, USER)

    with pytest.raises(InvalidArgumentError):
        await categories.update_record(created.id, {"surcharge_fixed_amount": 1000}, USER)

    switched = await categories.update_record(
        created.id, {"surcharge_percentage": 0, "surcharge_fixed_amount": 1000}, USER
    )
    assert switched.fields["surcharge_fixed_amount"] == 1000
