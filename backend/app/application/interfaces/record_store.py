"""Abstract store interface (port) for module records."""

from abc import ABC, abstractmethod

from app.domain.entities import GroupRow, GroupSpec, Predicate, Record, SortSpec


class RecordStore(ABC):
    """Port for record persistence and querying — implemented in the infrastructure layer.

    Reads apply exactly the predicate they are given; soft-delete exclusion is
    part of the predicate, not of the store.
    """

    @abstractmethod
    async def count(self, predicate: Predicate) -> int:
        """Number of records matching the predicate."""
        ...

    @abstractmethod
    async def find(
        self,
        predicate: Predicate,
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> list[Record]:
        """Matching records ordered by ``sort`` then ``id``, sliced by skip/limit."""
        ...

    @abstractmethod
    async def aggregate(self, predicate: Predicate, group_spec: GroupSpec) -> list[GroupRow]:
        """Grouped aggregates over every matching record (one row per group)."""
        ...

    @abstractmethod
    async def get(self, record_id: str) -> Record | None:
        """Retrieve one record by id, including soft-deleted ones."""
        ...

    @abstractmethod
    async def insert(self, record: Record) -> Record:
        """Persist a new record and return it."""
        ...

    @abstractmethod
    async def update(self, record: Record) -> Record:
        """Persist changes to an existing record (including soft deletes)."""
        ...
