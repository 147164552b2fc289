"""Context-bound repository interfaces.

ContextRepository[TContext] is bound to a data context rather than to one
entity type: reads name the entity type per call, and mutations infer it
from each entity, so a single call may create, update or delete entities of
different types in one commit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from src.domain.models.entity import TEntity
from src.domain.models.query import QuerySpec

TContext = TypeVar("TContext")


class ContextRepository(ABC, Generic[TContext]):
    """Synchronous CRUD over any entity type reachable from one context."""

    def all(
        self,
        entity_type: type[TEntity],
        predicate: Any = None,
        order_by: Any = None,
        skip: int | None = None,
        take: int | None = None,
        include: Any = (),
    ) -> list[TEntity]:
        return self.list(entity_type, QuerySpec.of(predicate, order_by, skip, take, include))

    def find(
        self,
        entity_type: type[TEntity],
        predicate: Any,
        include: Any = (),
        order_by: Any = None,
        skip: int | None = None,
        take: int | None = None,
    ) -> list[TEntity]:
        return self.all(entity_type, predicate, order_by, skip, take, include)

    def insert(self, *entities: Any) -> bool:
        return self.create(*entities)

    @abstractmethod
    def list(self, entity_type: type[TEntity], spec: QuerySpec) -> list[TEntity]: ...

    @abstractmethod
    def get(
        self, entity_type: type[TEntity], key: Any, include: Any = ()
    ) -> TEntity | None: ...

    @abstractmethod
    def exists(self, entity_type: type, key: Any) -> bool: ...

    @abstractmethod
    def any(self, entity_type: type, predicate: Any = None) -> bool: ...

    @abstractmethod
    def count(self, entity_type: type, predicate: Any = None) -> int: ...

    @abstractmethod
    def create(self, *entities: Any) -> bool: ...

    @abstractmethod
    def update(self, *entities: Any) -> bool: ...

    @abstractmethod
    def delete(self, *entities: Any) -> bool: ...


class AsyncContextRepository(ABC, Generic[TContext]):
    """Asynchronous CRUD over any entity type reachable from one context."""

    async def all(
        self,
        entity_type: type[TEntity],
        predicate: Any = None,
        order_by: Any = None,
        skip: int | None = None,
        take: int | None = None,
        include: Any = (),
    ) -> list[TEntity]:
        return await self.list(
            entity_type, QuerySpec.of(predicate, order_by, skip, take, include)
        )

    async def find(
        self,
        entity_type: type[TEntity],
        predicate: Any,
        include: Any = (),
        order_by: Any = None,
        skip: int | None = None,
        take: int | None = None,
    ) -> list[TEntity]:
        return await self.all(entity_type, predicate, order_by, skip, take, include)

    async def insert(self, *entities: Any) -> bool:
        return await self.create(*entities)

    @abstractmethod
    async def list(self, entity_type: type[TEntity], spec: QuerySpec) -> list[TEntity]: ...

    @abstractmethod
    async def get(
        self, entity_type: type[TEntity], key: Any, include: Any = ()
    ) -> TEntity | None: ...

    @abstractmethod
    async def exists(self, entity_type: type, key: Any) -> bool: ...

    @abstractmethod
    async def any(self, entity_type: type, predicate: Any = None) -> bool: ...

    @abstractmethod
    async def count(self, entity_type: type, predicate: Any = None) -> int: ...

    @abstractmethod
    async def create(self, *entities: Any) -> bool: ...

    @abstractmethod
    async def update(self, *entities: Any) -> bool: ...

    @abstractmethod
    async def delete(self, *entities: Any) -> bool: ...
