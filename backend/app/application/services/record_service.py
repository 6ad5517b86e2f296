"""Application service (use case) for module record operations."""

import logging
from typing import Any

from app.application.interfaces import IdValidator, RecordStore
from app.application.services.query_engine import QueryEngine
from app.domain.entities import ModuleConfig, PageResult, QueryParams, Record
from app.domain.exceptions import EntityNotFoundError, InvalidArgumentError

logger = logging.getLogger(__name__)


class RecordService:
    """Orchestrates listing and the create/update/soft-delete lifecycle of one module.

    Depends on the store and id-validator ports (DI).
    """

    def __init__(
        self,
        config: ModuleConfig,
        store: RecordStore,
        engine: QueryEngine,
        id_validator: IdValidator,
    ):
        self._config = config
        self._store = store
        self._engine = engine
        self._ids = id_validator

    @property
    def config(self) -> ModuleConfig:
        return self._config

    async def list_records(self, params: QueryParams) -> PageResult[Record]:
        return await self._engine.run(params, self._config, self._store)

    async def get_record(self, record_id: str) -> Record:
        self._check_id("id", record_id)
        record = await self._store.get(record_id)
        if record is None or record.is_deleted:
            raise EntityNotFoundError(self._config.entity_label, record_id)
        if self._config.derive is not None:
            record.derived = self._config.derive(record)
        return record

    async def create_record(self, values: dict[str, Any], user_id: str | None) -> Record:
        self._validate_values(values)
        self._validate_record(values)
        self._check_user(user_id)
        record = Record(
            module=self._config.name,
            fields=dict(values),
            created_by=user_id,
            updated_by=user_id,
        )
        created = await self._store.insert(record)
        logger.info("Created %s %s", self._config.entity_label, created.id)
        return created

    async def update_record(
        self, record_id: str, values: dict[str, Any], user_id: str | None
    ) -> Record:
        record = await self.get_record(record_id)
        self._validate_values(values)
        self._validate_record({**record.fields, **values})
        self._check_user(user_id)
        record.update(values, user_id)
        return await self._store.update(record)

    async def delete_record(self, record_id: str, user_id: str | None) -> bool:
        """Soft delete: the record stays in the store but disappears from queries."""
        record = await self.get_record(record_id)
        self._check_user(user_id)
        record.soft_delete(user_id)
        await self._store.update(record)
        logger.info("Soft-deleted %s %s", self._config.entity_label, record_id)
        return True

    # ── Validation ───────────────────────────────────────────────────

    def _validate_values(self, values: dict[str, Any]) -> None:
        unknown = sorted(set(values) - self._config.fields)
        if unknown:
            raise InvalidArgumentError(
                unknown[0], f"not a field of {self._config.entity_label}"
            )
        for name in self._config.reference_fields & set(values):
            if values[name] is not None:
                self._check_id(name, values[name])

    def _validate_record(self, fields: dict[str, Any]) -> None:
        if self._config.validate is not None:
            self._config.validate(fields)

    def _check_user(self, user_id: str | None) -> None:
        if user_id is not None:
            self._check_id("user_id", user_id)

    def _check_id(self, name: str, value: Any) -> None:
        if not isinstance(value, str) or not self._ids.is_valid(value):
            raise InvalidArgumentError(name, f"'{value}' is not a well-formed id")
