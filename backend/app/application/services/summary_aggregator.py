"""Summary aggregator — grouped counts/sums/averages over the full filtered set."""

from typing import Any

from app.application.interfaces import RecordStore
from app.application.services.concurrency import gather_all
from app.domain.entities import AggregateOp, GroupRow, GroupSpec, Predicate

_ADDITIVE = (AggregateOp.COUNT, AggregateOp.SUM)


class SummaryAggregator:
    """Runs one store aggregation per group spec and shapes the rows.

    Summaries always cover every record matching the predicate, never just the
    current page. Categories with no matching records are omitted, not zero-filled.
    """

    async def summarize(
        self,
        predicate: Predicate,
        group_specs: tuple[GroupSpec, ...],
        store: RecordStore,
    ) -> dict[str, Any]:
        results = await gather_all(
            *(store.aggregate(predicate, spec) for spec in group_specs)
        )
        return {
            spec.name: self.shape(spec, rows)
            for spec, rows in zip(group_specs, results)
        }

    @staticmethod
    def shape(spec: GroupSpec, rows: list[GroupRow]) -> dict[str, Any]:
        """Turn raw group rows into the summary layout for one spec.

        * ungrouped   → ``{alias: value}``; empty sets yield zeros
        * one count   → ``{key: count}``
        * otherwise   → ``{key: {alias: value}}``

        ``None`` and ``""`` keys share the missing label and their rows are merged.
        """
        if spec.group_by is None:
            values = rows[0].values if rows else {}
            return {agg.alias: values.get(agg.alias) or 0 for agg in spec.aggregates}

        parts: dict[Any, list[dict[str, Any]]] = {}
        for row in rows:
            key = spec.missing_label if row.key is None or row.key == "" else row.key
            parts.setdefault(key, []).append(row.values)

        single_count = len(spec.aggregates) == 1 and spec.aggregates[0].op is AggregateOp.COUNT
        shaped: dict[Any, Any] = {}
        for key, group in parts.items():
            merged = group[0] if len(group) == 1 else _merge(spec, group)
            values = {agg.alias: merged.get(agg.alias) or 0 for agg in spec.aggregates}
            shaped[key] = values[spec.aggregates[0].alias] if single_count else values
        return shaped


def _merge(spec: GroupSpec, group: list[dict[str, Any]]) -> dict[str, Any]:
    """Combine rows of one label; averages are weighted by the row count when the spec has one."""
    count_alias = next(
        (agg.alias for agg in spec.aggregates if agg.op is AggregateOp.COUNT and agg.where is None),
        None,
    )
    merged: dict[str, Any] = {}
    for agg in spec.aggregates:
        present = [
            (values[agg.alias], values.get(count_alias) or 1)
            for values in group
            if values.get(agg.alias) is not None
        ]
        numbers = [value for value, _ in present]
        if not numbers:
            merged[agg.alias] = None
        elif agg.op in _ADDITIVE:
            merged[agg.alias] = sum(numbers)
        elif agg.op is AggregateOp.MIN:
            merged[agg.alias] = min(numbers)
        elif agg.op is AggregateOp.MAX:
            merged[agg.alias] = max(numbers)
        else:
            weight = sum(w for _, w in present)
            merged[agg.alias] = sum(value * w for value, w in present) / weight
    return merged
