"""Domain entity — a module record with its lifecycle bookkeeping."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Record:
    """A single row of a back-office module (application, defaulter, ...).

    ``fields`` carries the module-specific values; the lifecycle attributes
    are shared by every module. Records are never physically removed —
    ``soft_delete`` flags them and every default query skips them.
    """

    module: str
    fields: dict[str, Any]
    id: str = field(default_factory=lambda: str(uuid4()))
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    is_deleted: bool = False
    deleted_at: datetime | None = None
    # Computed after retrieval, never persisted.
    derived: dict[str, Any] = field(default_factory=dict)

    def update(self, values: dict[str, Any], user_id: str | None) -> None:
        """Merge new field values and refresh the update bookkeeping."""
        self.fields.update(values)
        self.updated_by = user_id
        self.updated_at = _utcnow()

    def soft_delete(self, user_id: str | None) -> None:
        now = _utcnow()
        self.is_deleted = True
        self.deleted_at = now
        self.updated_by = user_id
        self.updated_at = now

    def values(self) -> dict[str, Any]:
        """Flat view of module fields plus lifecycle fields, used for matching."""
        return {
            **self.fields,
            "id": self.id,
            "created_by": self.created_by,
            "updated_by": self.updated_by,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "is_deleted": self.is_deleted,
            "deleted_at": self.deleted_at,
        }
