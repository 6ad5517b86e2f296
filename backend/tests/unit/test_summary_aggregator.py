"""Unit tests for SummaryAggregator — grouping and shaping rules."""

import pytest

from app.application.services.summary_aggregator import SummaryAggregator
from app.domain.entities import (
    Aggregate,
    AggregateOp,
    Condition,
    GroupRow,
    GroupSpec,
    Operator,
    Predicate,
    Record,
)
from tests.fakes import InMemoryRecordStore

_COUNT = Aggregate(AggregateOp.COUNT, "count")


def _staff(i: int, **fields) -> Record:
    return Record(module="user_staff", fields=fields, id=f"id-{i:03d}")


def test_ungrouped_empty_set_yields_zeros():
    spec = GroupSpec(
        name="totals",
        aggregates=(_COUNT, Aggregate(AggregateOp.SUM, "amount", field="total_overdue_amount")),
    )
    assert SummaryAggregator.shape(spec, []) == {"count": 0, "amount": 0}


def test_single_count_is_flattened_and_missing_keys_are_labelled():
    spec = GroupSpec(name="by_designation", aggregates=(_COUNT,), group_by="designation",
                     missing_label="Not Specified")
    rows = [
        GroupRow("Manager", {"count": 2}),
        GroupRow(None, {"count": 1}),
        GroupRow("", {"count": 3}),
    ]
    assert SummaryAggregator.shape(spec, rows) == {"Manager": 2, "Not Specified": 4}


def test_rows_sharing_the_missing_label_merge_every_aggregate():
    spec = GroupSpec(
        name="by_city",
        group_by="city_name",
        aggregates=(
            _COUNT,
            Aggregate(AggregateOp.SUM, "total", field="amount"),
            Aggregate(AggregateOp.AVG, "avg", field="amount"),
            Aggregate(AggregateOp.MIN, "low", field="amount"),
            Aggregate(AggregateOp.MAX, "high", field="amount"),
        ),
    )
    rows = [
        GroupRow(None, {"count": 1, "total": 100.0, "avg": 100.0, "low": 100.0, "high": 100.0}),
        GroupRow("", {"count": 3, "total": 900.0, "avg": 300.0, "low": 50.0, "high": 500.0}),
    ]

    assert SummaryAggregator.shape(spec, rows) == {
        "Unknown": {"count": 4, "total": 1000.0, "avg": 250.0, "low": 50.0, "high": 500.0},
    }


def test_multiple_aggregates_are_nested_per_key():
    spec = GroupSpec(
        name="by_status",
        group_by="status",
        aggregates=(
            _COUNT,
            Aggregate(AggregateOp.SUM, "total_amount", field="total_overdue_amount"),
        ),
    )
    rows = [
        GroupRow("Warning", {"count": 2, "total_amount": 300.0}),
        GroupRow("Suspended", {"count": 1, "total_amount": None}),
    ]
    assert SummaryAggregator.shape(spec, rows) == {
        "Warning": {"count": 2, "total_amount": 300.0},
        "Suspended": {"count": 1, "total_amount": 0},
    }


@pytest.mark.asyncio
async def test_summarize_covers_every_matching_record_not_just_a_page():
    store = InMemoryRecordStore(
        [_staff(i, role_name="Clerk" if i % 3 else "Admin", is_active=i % 2 == 0) for i in range(1, 31)]
    )
    specs = (
        GroupSpec(
            name="totals",
            aggregates=(
                Aggregate(AggregateOp.COUNT, "total"),
                Aggregate(AggregateOp.COUNT, "active", where=Condition("is_active", Operator.EQ, True)),
            ),
        ),
        GroupSpec(name="by_role", aggregates=(_COUNT,), group_by="role_name"),
    )

    summary = await SummaryAggregator().summarize(Predicate(), specs, store)

    assert summary["totals"] == {"total": 30, "active": 15}
    assert summary["by_role"] == {"Clerk": 20, "Admin": 10}
    assert store.calls.count("aggregate") == 2


@pytest.mark.asyncio
async def test_categories_without_matches_are_omitted():
    store = InMemoryRecordStore([_staff(1, role_name="Clerk"), _staff(2, role_name="Admin")])
    predicate = Predicate((Condition("role_name", Operator.EQ, "Clerk"),))
    spec = GroupSpec(name="by_role", aggregates=(_COUNT,), group_by="role_name")

    summary = await SummaryAggregator().summarize(predicate, (spec,), store)

    assert summary == {"by_role": {"Clerk": 1}}
