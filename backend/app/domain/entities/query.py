"""Domain entities for record queries — predicates, sorting, paging, and summaries.

These objects are storage-agnostic. A store adapter either evaluates a
``Predicate`` directly (``Predicate.matches``) or compiles it into its own
query language.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Operator(str, Enum):
    EQ = "eq"
    IN = "in"
    GT = "gt"
    GTE = "gte"
    LTE = "lte"
    CONTAINS = "contains"  # case-insensitive literal substring


@dataclass(frozen=True)
class Condition:
    """A single field comparison."""

    field: str
    op: Operator
    value: Any

    def matches(self, values: dict[str, Any]) -> bool:
        actual = values.get(self.field)
        if self.op is Operator.EQ:
            return actual == self.value
        if self.op is Operator.IN:
            return actual in self.value
        if actual is None:
            return False
        if self.op is Operator.CONTAINS:
            return str(self.value).lower() in str(actual).lower()
        if self.op is Operator.GT:
            return actual > self.value
        if self.op is Operator.GTE:
            return actual >= self.value
        if self.op is Operator.LTE:
            return actual <= self.value
        raise ValueError(f"Unsupported operator: {self.op}")


@dataclass(frozen=True)
class AnyOf:
    """Disjunction of conditions — used for free-text search across fields."""

    conditions: tuple[Condition, ...]

    def matches(self, values: dict[str, Any]) -> bool:
        return any(c.matches(values) for c in self.conditions)


@dataclass(frozen=True)
class Predicate:
    """Conjunction of conditions and disjunction groups."""

    clauses: tuple[Condition | AnyOf, ...] = ()

    def matches(self, values: dict[str, Any]) -> bool:
        return all(clause.matches(values) for clause in self.clauses)

    def fields(self) -> set[str]:
        """Every field name referenced by the predicate."""
        names: set[str] = set()
        for clause in self.clauses:
            if isinstance(clause, AnyOf):
                names.update(c.field for c in clause.conditions)
            else:
                names.add(clause.field)
        return names


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    field: str
    order: SortOrder = SortOrder.DESC


# ── Summaries ────────────────────────────────────────────────────────


class AggregateOp(str, Enum):
    COUNT = "count"
    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"


@dataclass(frozen=True)
class Aggregate:
    """One aggregate column, optionally restricted to rows matching ``where``.

    A tuple of conditions in ``where`` must all hold.
    """

    op: AggregateOp
    alias: str
    field: str | None = None
    where: Condition | tuple[Condition, ...] | None = None

    @property
    def conditions(self) -> tuple[Condition, ...]:
        if self.where is None:
            return ()
        return self.where if isinstance(self.where, tuple) else (self.where,)

    def applies_to(self, values: dict[str, Any]) -> bool:
        return all(c.matches(values) for c in self.conditions)


@dataclass(frozen=True)
class GroupSpec:
    """A named summary section; ``group_by=None`` aggregates the whole set."""

    name: str
    aggregates: tuple[Aggregate, ...]
    group_by: str | None = None
    missing_label: str = "Unknown"


@dataclass
class GroupRow:
    """One row of a grouped aggregation: the group key and its aggregate values."""

    key: Any
    values: dict[str, Any] = field(default_factory=dict)


# ── Requests and results ─────────────────────────────────────────────


@dataclass
class QueryParams:
    """Raw, untrusted list parameters as received from a caller."""

    page: int | None = None
    limit: int | None = None
    search: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None
    filters: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PageMeta:
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PageMeta":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


@dataclass
class PageResult(Generic[T]):
    """One page of records plus its metadata and the filtered-set summary."""

    records: list[T]
    pagination: PageMeta
    summary: dict[str, Any] = field(default_factory=dict)
