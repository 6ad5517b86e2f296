"""Declarative description of how one module's records are listed and summarised."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .query import Condition, GroupSpec, Operator, SortOrder, SortSpec
from .record import Record


class FilterKind(str, Enum):
    EXACT = "exact"
    REFERENCE = "reference"
    ENUM_SET = "enum_set"
    RANGE = "range"
    CONTAINS = "contains"
    PRESET = "preset"  # value picks a fixed set of conditions


class ValueType(str, Enum):
    STR = "str"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DATE = "date"


@dataclass(frozen=True)
class FilterSpec:
    """How one query parameter maps onto a record field.

    ``bound`` is required for range filters and must be ``Operator.GTE`` or
    ``Operator.LTE``. ``choices`` lists the allowed values of an enum-set
    filter; ``presets`` maps each accepted value of a preset filter to the
    conditions it stands for.
    """

    field: str
    kind: FilterKind
    value_type: ValueType = ValueType.STR
    bound: Operator | None = None
    choices: tuple[str, ...] = ()
    presets: dict[str, tuple[Condition, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class ModuleConfig:
    """Everything the query engine needs to know about one module."""

    name: str
    entity_label: str
    fields: frozenset[str]
    searchable_fields: tuple[str, ...]
    filterable_fields: dict[str, FilterSpec]
    sortable_fields: frozenset[str]
    default_sort: SortSpec
    default_limit: int = 10
    summary: tuple[GroupSpec, ...] | Callable[[], tuple[GroupSpec, ...]] = ()
    reference_fields: frozenset[str] = frozenset()
    finalize: Callable[[dict[str, Any]], dict[str, Any]] | None = None
    derive: Callable[[Record], dict[str, Any]] | None = None
    validate: Callable[[dict[str, Any]], None] | None = None

    def sort_for(self, sort_by: str | None, sort_order: str | None) -> SortSpec:
        """Resolve a requested sort, falling back to the default per component."""
        sort_field = sort_by if sort_by in self.sortable_fields else self.default_sort.field
        try:
            order = SortOrder((sort_order or "").lower())
        except ValueError:
            order = self.default_sort.order
        return SortSpec(field=sort_field, order=order)

    def summary_specs(self) -> tuple[GroupSpec, ...]:
        """Group specs for this call; callables allow time-relative conditions."""
        return self.summary() if callable(self.summary) else self.summary
