from .record import Record
from .query import (
    Aggregate,
    AggregateOp,
    AnyOf,
    Condition,
    GroupRow,
    GroupSpec,
    Operator,
    PageMeta,
    PageResult,
    Predicate,
    QueryParams,
    SortOrder,
    SortSpec,
)
from .module_config import FilterKind, FilterSpec, ModuleConfig, ValueType

__all__ = [
    "Record",
    "Aggregate",
    "AggregateOp",
    "AnyOf",
    "Condition",
    "GroupRow",
    "GroupSpec",
    "Operator",
    "PageMeta",
    "PageResult",
    "Predicate",
    "QueryParams",
    "SortOrder",
    "SortSpec",
    "FilterKind",
    "FilterSpec",
    "ModuleConfig",
    "ValueType",
]
