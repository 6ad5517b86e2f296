"""Filter builder — turns raw list parameters into a store-agnostic predicate.

Pure: no I/O and no side effects. Every malformed value is rejected here,
before any store query is issued.
"""

import logging
import math
from datetime import date, datetime, time, timezone
from typing import Any

from app.application.interfaces import IdValidator
from app.domain.derivations import as_utc
from app.domain.entities import (
    AnyOf,
    Condition,
    FilterKind,
    FilterSpec,
    ModuleConfig,
    Operator,
    Predicate,
    QueryParams,
    SortSpec,
    ValueType,
)
from app.domain.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

_TRUE = frozenset({"true", "1", "yes"})
_FALSE = frozenset({"false", "0", "no"})

# Integer filter values must fit a signed 64-bit bind parameter.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set)):
        return not any(not _is_blank(v) for v in value)
    return False


class FilterBuilder:
    """Builds predicates and sort specs for one module's list query."""

    def __init__(self, id_validator: IdValidator):
        self._ids = id_validator

    def build(self, params: QueryParams, config: ModuleConfig) -> Predicate:
        clauses: list[Condition | AnyOf] = [Condition("is_deleted", Operator.EQ, False)]

        search = (params.search or "").strip()
        if search and config.searchable_fields:
            clauses.append(
                AnyOf(tuple(
                    Condition(name, Operator.CONTAINS, search)
                    for name in config.searchable_fields
                ))
            )

        for name, raw in params.filters.items():
            spec = config.filterable_fields.get(name)
            if spec is None:
                logger.debug("Ignoring unknown filter '%s' for module %s", name, config.name)
                continue
            if _is_blank(raw):
                continue
            clauses.extend(self._clauses_for(name, spec, raw))

        return Predicate(tuple(clauses))

    def resolve_sort(self, params: QueryParams, config: ModuleConfig) -> SortSpec:
        """Requested sort, or the module default for unknown fields/orders."""
        sort = config.sort_for(params.sort_by, params.sort_order)
        if params.sort_by and sort.field != params.sort_by:
            logger.debug(
                "Unknown sort field '%s' for module %s — using '%s'",
                params.sort_by, config.name, sort.field,
            )
        return sort

    # ── Per-kind translation ─────────────────────────────────────────

    def _clauses_for(self, name: str, spec: FilterSpec, raw: Any) -> list[Condition]:
        if spec.kind is FilterKind.REFERENCE:
            value = str(raw).strip()
            if not self._ids.is_valid(value):
                raise InvalidArgumentError(name, f"'{value}' is not a well-formed id")
            return [Condition(spec.field, Operator.EQ, value)]

        if spec.kind is FilterKind.ENUM_SET:
            items = raw if isinstance(raw, (list, tuple, set)) else str(raw).split(",")
            values = tuple(dict.fromkeys(str(v).strip() for v in items if not _is_blank(v)))
            unknown = [v for v in values if spec.choices and v not in spec.choices]
            if unknown:
                raise InvalidArgumentError(
                    name, f"unknown value(s) {unknown}; expected one of {list(spec.choices)}"
                )
            return [Condition(spec.field, Operator.IN, values)]

        if spec.kind is FilterKind.RANGE:
            if spec.bound not in (Operator.GTE, Operator.LTE):
                raise ValueError(f"Range filter '{name}' needs a gte/lte bound")
            value = _coerce(name, spec.value_type, raw, end_of_day=spec.bound is Operator.LTE)
            return [Condition(spec.field, spec.bound, value)]

        if spec.kind is FilterKind.EXACT:
            return [Condition(spec.field, Operator.EQ, _coerce(name, spec.value_type, raw))]

        if spec.kind is FilterKind.CONTAINS:
            return [Condition(spec.field, Operator.CONTAINS, str(raw).strip())]

        if spec.kind is FilterKind.PRESET:
            key = str(raw).strip().lower()
            if key not in spec.presets:
                raise InvalidArgumentError(
                    name, f"'{raw}' is not one of {sorted(spec.presets)}"
                )
            return list(spec.presets[key])

        raise ValueError(f"Unsupported filter kind: {spec.kind}")


def _coerce(name: str, value_type: ValueType, raw: Any, end_of_day: bool = False) -> Any:
    """Convert a raw parameter to the filter's value type or raise InvalidArgumentError."""
    if value_type is ValueType.STR:
        return str(raw).strip()

    if value_type is ValueType.BOOL:
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise InvalidArgumentError(name, f"'{raw}' is not a boolean")

    if value_type is ValueType.INT:
        try:
            number = int(str(raw).strip())
        except ValueError:
            raise InvalidArgumentError(name, f"'{raw}' is not an integer") from None
        if not INT64_MIN <= number <= INT64_MAX:
            raise InvalidArgumentError(name, f"{number} is out of range")
        return number

    if value_type is ValueType.FLOAT:
        try:
            number = float(str(raw).strip())
        except ValueError:
            raise InvalidArgumentError(name, f"'{raw}' is not a number") from None
        if not math.isfinite(number):
            raise InvalidArgumentError(name, f"'{raw}' is not a finite number")
        return number

    if value_type is ValueType.DATE:
        return _parse_date(name, raw, end_of_day)

    raise ValueError(f"Unsupported value type: {value_type}")


def _parse_date(name: str, raw: Any, end_of_day: bool) -> datetime:
    """Parse an ISO date or datetime to aware UTC.

    A bare date used as an upper bound covers that whole day.
    """
    if isinstance(raw, datetime):
        return as_utc(raw)
    if isinstance(raw, date):
        day = raw
    else:
        text = str(raw).strip()
        try:
            day = date.fromisoformat(text)
        except ValueError:
            try:
                return as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
            except ValueError:
                raise InvalidArgumentError(name, f"'{raw}' is not an ISO-8601 date") from None
    return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=timezone.utc)
