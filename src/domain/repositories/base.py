"""Generic repository base interfaces.

Repository[TEntity, TKey] is the root abstraction for data access bound to a
single entity type; AsyncRepository is its coroutine twin with the same
method names and contracts.  Concrete implementations live in
src/infrastructure/persistence/repositories/.

Design notes:
  - Every call is its own unit of work: implementations open a session,
    perform the operation, commit if mutating, and close the session.
  - Mutations take any number of entities and return True when the number
    of affected rows is at least the number submitted.  A False result
    says nothing about which entity failed, and the rows that did succeed
    stay committed.
  - get() returns None when nothing matches and raises AmbiguousMatchError
    when more than one row does.
  - all(), find() and insert() are conveniences over list() and create().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic

from src.domain.models.entity import TEntity, TKey
from src.domain.models.query import QuerySpec


class Repository(ABC, Generic[TEntity, TKey]):
    """Synchronous CRUD interface for one entity type."""

    def all(
        self,
        predicate: Any = None,
        order_by: Any = None,
        skip: int | None = None,
        take: int | None = None,
        include: Any = (),
    ) -> list[TEntity]:
        """Return matching entities; with no arguments, every row."""
        return self.list(QuerySpec.of(predicate, order_by, skip, take, include))

    def find(
        self,
        predicate: Any,
        include: Any = (),
        order_by: Any = None,
        skip: int | None = None,
        take: int | None = None,
    ) -> list[TEntity]:
        """Return entities matching predicate."""
        return self.all(predicate, order_by, skip, take, include)

    def insert(self, *entities: TEntity) -> bool:
        return self.create(*entities)

    @abstractmethod
    def list(self, spec: QuerySpec) -> list[TEntity]:
        """Execute a prebuilt query descriptor."""

    @abstractmethod
    def get(self, key: TKey | Any, include: Any = ()) -> TEntity | None:
        """Return the single entity matching a key or predicate, or None."""

    @abstractmethod
    def exists(self, key: TKey | Any) -> bool:
        """Return True if a row matches the key or predicate."""

    @abstractmethod
    def any(self, predicate: Any = None) -> bool:
        """Return True if any row matches predicate (any row at all when None)."""

    @abstractmethod
    def count(self, predicate: Any = None) -> int:
        """Return the number of rows matching predicate."""

    @abstractmethod
    def create(self, *entities: TEntity) -> bool:
        """Insert entities and commit."""

    @abstractmethod
    def update(self, *entities: TEntity) -> bool:
        """Persist changes to existing entities and commit.  Never inserts."""

    @abstractmethod
    def delete(self, *entities: TEntity) -> bool:
        """Remove entities and commit."""


class AsyncRepository(ABC, Generic[TEntity, TKey]):
    """Asynchronous CRUD interface for one entity type."""

    async def all(
        self,
        predicate: Any = None,
        order_by: Any = None,
        skip: int | None = None,
        take: int | None = None,
        include: Any = (),
    ) -> list[TEntity]:
        """Return matching entities; with no arguments, every row."""
        return await self.list(QuerySpec.of(predicate, order_by, skip, take, include))

    async def find(
        self,
        predicate: Any,
        include: Any = (),
        order_by: Any = None,
        skip: int | None = None,
        take: int | None = None,
    ) -> list[TEntity]:
        """Return entities matching predicate."""
        return await self.all(predicate, order_by, skip, take, include)

    async def insert(self, *entities: TEntity) -> bool:
        return await self.create(*entities)

    @abstractmethod
    async def list(self, spec: QuerySpec) -> list[TEntity]:
        """Execute a prebuilt query descriptor."""

    @abstractmethod
    async def get(self, key: TKey | Any, include: Any = ()) -> TEntity | None:
        """Return the single entity matching a key or predicate, or None."""

    @abstractmethod
    async def exists(self, key: TKey | Any) -> bool:
        """Return True if a row matches the key or predicate."""

    @abstractmethod
    async def any(self, predicate: Any = None) -> bool:
        """Return True if any row matches predicate (any row at all when None)."""

    @abstractmethod
    async def count(self, predicate: Any = None) -> int:
        """Return the number of rows matching predicate."""

    @abstractmethod
    async def create(self, *entities: TEntity) -> bool:
        """Insert entities and commit."""

    @abstractmethod
    async def update(self, *entities: TEntity) -> bool:
        """Persist changes to existing entities and commit.  Never inserts."""

    @abstractmethod
    async def delete(self, *entities: TEntity) -> bool:
        """Remove entities and commit."""
