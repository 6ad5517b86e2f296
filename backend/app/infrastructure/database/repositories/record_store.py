"""Concrete RecordStore backed by SQLAlchemy — one instance per module table."""

import asyncio
import logging
import math
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    Boolean,
    ColumnElement,
    DateTime,
    Integer,
    Numeric,
    String,
    and_,
    case,
    cast,
    func,
    or_,
    select,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import RecordStore
from app.domain.derivations import as_utc
from app.domain.entities import (
    Aggregate,
    AggregateOp,
    AnyOf,
    Condition,
    GroupRow,
    GroupSpec,
    Operator,
    Predicate,
    Record,
    SortOrder,
    SortSpec,
)
from app.domain.exceptions import DependencyFailureError, InvalidArgumentError
from app.infrastructure.database.models import LifecycleMixin

logger = logging.getLogger(__name__)

_LIFECYCLE_COLUMNS = frozenset({
    "id",
    "created_by",
    "updated_by",
    "created_at",
    "updated_at",
    "is_deleted",
    "deleted_at",
})

_LIKE_ESCAPE = "\\"

# Integer columns map to a 4-byte INTEGER on PostgreSQL.
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user search text matches literally."""
    return (
        text.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )


class SQLAlchemyRecordStore(RecordStore):
    """Implements the RecordStore port for one module table.

    An AsyncSession does not allow concurrent operations, while the query
    engine awaits the page, the count and the summary together, so every
    statement runs under a per-store lock.
    """

    def __init__(self, session: AsyncSession, model: type[LifecycleMixin]):
        self._session = session
        self._model = model
        self._module = model.__tablename__
        self._columns = model.__table__.c
        self._field_names = [c.name for c in self._columns if c.name not in _LIFECYCLE_COLUMNS]
        self._lock = asyncio.Lock()

    # ── Reads ────────────────────────────────────────────────────────

    async def count(self, predicate: Predicate) -> int:
        stmt = select(func.count()).select_from(self._model).where(*self._compile(predicate))
        result = await self._execute("count", stmt)
        return result.scalar_one()

    async def find(
        self,
        predicate: Predicate,
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> list[Record]:
        sort_column = self._column(sort.field)
        ordering = sort_column.asc() if sort.order is SortOrder.ASC else sort_column.desc()
        stmt = (
            select(self._model)
            .where(*self._compile(predicate))
            .order_by(ordering, self._model.id.asc())
            .offset(skip)
            .limit(limit)
        )
        result = await self._execute("find", stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def aggregate(self, predicate: Predicate, group_spec: GroupSpec) -> list[GroupRow]:
        columns = [self._aggregate_column(agg).label(agg.alias) for agg in group_spec.aggregates]
        where = self._compile(predicate)

        if group_spec.group_by is None:
            stmt = select(*columns).select_from(self._model).where(*where)
            result = await self._execute("aggregate", stmt)
            row = result.one()
            return [GroupRow(key=None, values=_plain_values(row._mapping))]

        key = self._column(group_spec.group_by)
        if isinstance(key.type, String):
            # Empty strings group with NULL.
            key = func.nullif(key, "")
        stmt = (
            select(key.label("group_key"), *columns)
            .select_from(self._model)
            .where(*where)
            .group_by(key)
        )
        result = await self._execute("aggregate", stmt)
        rows = []
        for row in result.all():
            values = _plain_values(row._mapping)
            rows.append(GroupRow(key=values.pop("group_key"), values=values))
        return rows

    async def get(self, record_id: str) -> Record | None:
        async with self._lock:
            try:
                model = await self._session.get(self._model, record_id)
            except SQLAlchemyError as exc:
                logger.error("%s get failed: %s", self._module, exc)
                raise DependencyFailureError("get", str(exc)) from exc
        return self._to_entity(model) if model else None

    # ── Writes ───────────────────────────────────────────────────────

    async def insert(self, record: Record) -> Record:
        model = self._model(
            id=record.id,
            created_by=record.created_by,
            updated_by=record.updated_by,
            created_at=record.created_at,
            updated_at=record.updated_at,
            is_deleted=record.is_deleted,
            deleted_at=record.deleted_at,
            **self._column_values(record.fields),
        )
        async with self._lock:
            self._session.add(model)
            await self._flush("insert")
        return self._to_entity(model)

    async def update(self, record: Record) -> Record:
        async with self._lock:
            try:
                model = await self._session.get(self._model, record.id)
            except SQLAlchemyError as exc:
                logger.error("%s update failed: %s", self._module, exc)
                raise DependencyFailureError("update", str(exc)) from exc
            if model is None:
                raise ValueError(f"{self._module} record {record.id} not found in database")
            for name, value in self._column_values(record.fields).items():
                setattr(model, name, value)
            model.updated_by = record.updated_by
            model.updated_at = record.updated_at
            model.is_deleted = record.is_deleted
            model.deleted_at = record.deleted_at
            await self._flush("update")
        return self._to_entity(model)

    # ── Session helpers ──────────────────────────────────────────────

    async def _execute(self, operation: str, stmt):
        async with self._lock:
            try:
                return await self._session.execute(stmt)
            except SQLAlchemyError as exc:
                logger.error("%s %s failed: %s", self._module, operation, exc)
                raise DependencyFailureError(operation, str(exc)) from exc

    async def _flush(self, operation: str) -> None:
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise InvalidArgumentError(
                "fields", f"conflicts with an existing {self._module} record"
            ) from exc
        except SQLAlchemyError as exc:
            logger.error("%s %s failed: %s", self._module, operation, exc)
            raise DependencyFailureError(operation, str(exc)) from exc

    # ── Predicate compilation ────────────────────────────────────────

    def _column(self, name: str) -> ColumnElement:
        try:
            return self._columns[name]
        except KeyError:
            raise InvalidArgumentError(name, f"not a column of {self._module}") from None

    def _compile(self, predicate: Predicate) -> list[ColumnElement]:
        clauses = []
        for clause in predicate.clauses:
            if isinstance(clause, AnyOf):
                clauses.append(or_(*(self._condition(c) for c in clause.conditions)))
            else:
                clauses.append(self._condition(clause))
        return clauses

    def _condition(self, condition: Condition) -> ColumnElement:
        column = self._column(condition.field)
        value = _bind(condition.value)

        if condition.op is Operator.EQ:
            return column.is_(None) if value is None else column == value
        if condition.op is Operator.IN:
            return column.in_([_bind(v) for v in value])
        if condition.op is Operator.GT:
            return column > value
        if condition.op is Operator.GTE:
            return column >= value
        if condition.op is Operator.LTE:
            return column <= value
        if condition.op is Operator.CONTAINS:
            target = column if isinstance(column.type, String) else cast(column, String)
            return target.ilike(f"%{escape_like(str(value))}%", escape=_LIKE_ESCAPE)
        raise ValueError(f"Unsupported operator: {condition.op}")

    def _aggregate_column(self, agg: Aggregate) -> ColumnElement:
        if agg.op is AggregateOp.COUNT:
            if agg.where is None:
                return func.count(self._model.id)
            return func.coalesce(func.sum(case((self._where(agg), 1), else_=0)), 0)

        column = self._column(agg.field)
        if agg.where is not None:
            column = case((self._where(agg), column), else_=None)
        if agg.op is AggregateOp.SUM:
            return func.sum(column)
        if agg.op is AggregateOp.AVG:
            return func.avg(column)
        if agg.op is AggregateOp.MIN:
            return func.min(column)
        if agg.op is AggregateOp.MAX:
            return func.max(column)
        raise ValueError(f"Unsupported aggregate: {agg.op}")

    def _where(self, agg: Aggregate) -> ColumnElement:
        return and_(*(self._condition(c) for c in agg.conditions))

    # ── Mapping ──────────────────────────────────────────────────────

    def _column_values(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Module fields → column values, coerced to each column's type.

        A value the column cannot hold raises InvalidArgumentError before any
        statement reaches the driver.
        """
        values = {}
        for name, value in fields.items():
            column = self._column(name)
            values[name] = None if value is None else _coerce_column(name, column.type, value)
        return values

    def _to_entity(self, model: LifecycleMixin) -> Record:
        """Map ORM model → domain entity."""
        return Record(
            module=self._module,
            fields={name: _read(getattr(model, name)) for name in self._field_names},
            id=model.id,
            created_by=model.created_by,
            updated_by=model.updated_by,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            is_deleted=model.is_deleted,
            deleted_at=as_utc(model.deleted_at),
        )


def _bind(value: Any) -> Any:
    """Datetimes are compared in UTC; SQLite stores them without an offset."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc)
    return value


def _read(value: Any) -> Any:
    if isinstance(value, datetime):
        return as_utc(value)
    return value


def _coerce_column(name: str, column_type: Any, value: Any) -> Any:
    if isinstance(column_type, DateTime):
        return _parse_datetime(name, value)
    if isinstance(column_type, Boolean):
        if isinstance(value, bool):
            return value
        raise InvalidArgumentError(name, f"'{value}' is not a boolean")
    if isinstance(column_type, Integer):
        return _parse_int(name, value)
    if isinstance(column_type, Numeric):
        return _parse_number(name, value)
    if isinstance(column_type, String):
        if isinstance(value, str):
            return value
        raise InvalidArgumentError(name, f"expected text, got {type(value).__name__}")
    return value


def _parse_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidArgumentError(name, f"'{value}' is not an integer")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        try:
            value = int(str(value).strip())
        except ValueError:
            raise InvalidArgumentError(name, f"'{value}' is not an integer") from None
    if not INT32_MIN <= value <= INT32_MAX:
        raise InvalidArgumentError(name, f"{value} is out of range")
    return value


def _parse_number(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidArgumentError(name, f"'{value}' is not a number")
    try:
        number = float(value if isinstance(value, (int, float)) else str(value).strip())
    except (OverflowError, ValueError):
        raise InvalidArgumentError(name, f"'{value}' is not a number") from None
    if not math.isfinite(number):
        raise InvalidArgumentError(name, f"'{value}' is not a finite number")
    return number


def _parse_datetime(name: str, value: Any) -> datetime:
    if isinstance(value, datetime):
        return _bind(value)
    if isinstance(value, date):
        return as_utc(value)
    text = str(value).strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidArgumentError(name, f"'{value}' is not an ISO-8601 date") from None
    return _bind(as_utc(parsed))


def _plain_values(mapping) -> dict[str, Any]:
    """Driver numerics (Decimal from PostgreSQL AVG/SUM) → float."""
    return {
        key: float(value) if isinstance(value, Decimal) else value
        for key, value in mapping.items()
    }
