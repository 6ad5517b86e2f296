"""HTTP tests for the record and plot pricing endpoints over a temporary SQLite database."""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.services import FilterBuilder, QueryEngine, RecordService
from app.domain.entities import Predicate
from app.domain.exceptions import DependencyFailureError
from app.domain.modules import DEFAULTERS
from app.infrastructure.database import build_engine, create_tables
from app.infrastructure.database.session import get_db_session
from app.infrastructure.dependencies import get_record_service
from app.infrastructure.identifiers import UUIDIdValidator
from app.main import app
from tests.fakes import InMemoryRecordStore

USER_ID = str(uuid.uuid4())


@pytest_asyncio.fixture
async def client(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'api.db'}")
    await create_tables(engine)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
    await engine.dispose()


async def _create(client, module: str, fields: dict) -> dict:
    response = await client.post(
        f"/api/v1/{module}", json={"fields": fields}, headers={"X-User-Id": USER_ID}
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_and_get_record(client):
    created = await _create(client, "applications", {"application_no": "APP-001", "remarks": "new plot"})

    response = await client.get(f"/api/v1/applications/{created['id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["fields"]["application_no"] == "APP-001"
    assert data["created_by"] == USER_ID
    assert data["module"] == "applications"


@pytest.mark.asyncio
async def test_list_returns_records_pagination_and_summary(client):
    for n in range(1, 4):
        await _create(client, "defaulters", {
            "member_id": str(uuid.uuid4()),
            "status": "Warning" if n < 3 else "Suspended",
            "total_overdue_amount": 1000.0 * n,
            "days_overdue": 30 * n,
        })

    response = await client.get("/api/v1/defaulters", params={"limit": 2, "status": "Warning"})

    assert response.status_code == 200
    data = response.json()
    assert len(data["records"]) == 2
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 2, "pages": 1}
    assert data["summary"]["total_defaulters"] == 2
    assert data["summary"]["total_overdue_amount"] == 3000.0
    assert "aging_bucket" in data["records"][0]["derived"]


@pytest.mark.asyncio
async def test_repeated_query_parameter_is_a_value_set(client):
    for status in ("Warning", "Suspended", "Resolved"):
        await _create(client, "defaulters", {"member_id": str(uuid.uuid4()), "status": status})

    response = await client.get("/api/v1/defaulters?status=Warning&status=Resolved")

    assert response.status_code == 200
    assert sorted(r["fields"]["status"] for r in response.json()["records"]) == ["Resolved", "Warning"]


@pytest.mark.asyncio
async def test_junk_paging_values_fall_back_to_defaults(client):
    response = await client.get("/api/v1/user_staff", params={"page": "-4", "limit": "many"})

    assert response.status_code == 200
    assert response.json()["pagination"] == {"page": 1, "limit": 20, "total": 0, "pages": 0}


@pytest.mark.asyncio
async def test_page_far_past_the_end_is_empty_not_an_error(client):
    await _create(client, "applications", {"application_no": "APP-900"})

    response = await client.get("/api/v1/applications", params={"page": "99999999999999999999"})

    assert response.status_code == 200
    data = response.json()
    assert data["records"] == []
    assert data["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_integer_filter_beyond_64_bits_is_400(client):
    response = await client.get("/api/v1/defaulters", params={"min_days": "99999999999999999999"})

    assert response.status_code == 400
    assert "min_days" in response.json()["detail"]


@pytest.mark.asyncio
async def test_mistyped_field_value_is_400_without_sql(client):
    response = await client.post(
        "/api/v1/installments",
        json={"fields": {"member_id": USER_ID, "plot_id": USER_ID, "installment_no": 1,
                         "due_date": "2024-07-01", "amount_due": "abc"}},
        headers={"X-User-Id": USER_ID},
    )

    assert response.status_code == 400
    assert "amount_due" in response.json()["detail"]
    assert "INSERT" not in response.json()["detail"]


@pytest.mark.asyncio
async def test_both_surcharges_are_rejected(client):
    response = await client.post(
        "/api/v1/plot_categories",
        json={"fields": {"category_name": "Corner", "surcharge_percentage": 5, "surcharge_fixed_amount": 100}},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_malformed_reference_filter_is_400(client):
    response = await client.get("/api/v1/applications", params={"member_id": "12"})

    assert response.status_code == 400
    assert "member_id" in response.json()["detail"]


@pytest.mark.asyncio
async def test_unknown_module_is_404(client):
    response = await client.get("/api/v1/spaceships")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_missing_record_is_404(client):
    response = await client.get(f"/api/v1/applications/{uuid.uuid4()}")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_with_unknown_field_is_400(client):
    created = await _create(client, "applications", {"application_no": "APP-002"})

    response = await client.put(
        f"/api/v1/applications/{created['id']}", json={"fields": {"colour": "red"}}
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_then_soft_delete(client):
    created = await _create(client, "applications", {"application_no": "APP-003"})
    record_url = f"/api/v1/applications/{created['id']}"

    updated = await client.put(record_url, json={"fields": {"remarks": "approved"}})
    deleted = await client.delete(record_url, headers={"X-User-Id": USER_ID})
    after = await client.get(record_url)
    listing = await client.get("/api/v1/applications")

    assert updated.status_code == 200
    assert updated.json()["fields"]["remarks"] == "approved"
    assert deleted.status_code == 204
    assert after.status_code == 404
    assert listing.json()["pagination"]["total"] == 0


@pytest.mark.asyncio
async def test_plot_price_and_bulk_price(client):
    corner = await _create(client, "plot_categories", {"category_name": "Corner", "surcharge_percentage": 10})
    park = await _create(client, "plot_categories", {"category_name": "Park", "surcharge_fixed_amount": 50000})
    retired = await _create(
        client, "plot_categories", {"category_name": "Old", "surcharge_percentage": 3, "is_active": False}
    )

    single = await client.post(
        f"/api/v1/plot_categories/{corner['id']}/price", json={"base_price": 2000000}
    )
    inactive = await client.post(
        f"/api/v1/plot_categories/{retired['id']}/price", json={"base_price": 2000000}
    )
    bulk = await client.post(
        "/api/v1/plot_categories/bulk-price",
        json={"category_ids": [corner["id"], park["id"], retired["id"]], "base_price": 1000000},
    )

    assert single.status_code == 200
    assert single.json()["final_price"] == 2200000.0
    assert inactive.status_code == 404
    assert bulk.status_code == 200
    assert set(bulk.json()) == {corner["id"], park["id"]}
    assert bulk.json()[park["id"]]["formatted_value"] == "PKR 50,000.00"


@pytest.mark.asyncio
async def test_store_failure_is_503():
    class UnavailableStore(InMemoryRecordStore):
        async def count(self, predicate: Predicate) -> int:
            raise DependencyFailureError("count", "connection refused")

    ids = UUIDIdValidator()
    service = RecordService(DEFAULTERS, UnavailableStore(), QueryEngine(FilterBuilder(ids)), ids)
    app.dependency_overrides[get_record_service] = lambda: service
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/v1/defaulters")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert "connection refused" not in response.json()["detail"]
