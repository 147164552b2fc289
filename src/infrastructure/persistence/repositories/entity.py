"""SQLAlchemy implementation of Repository / AsyncRepository.

SqlRepository binds a context repository to one entity type.  Mutations
reject instances of any other type up front, so a batch either targets the
bound table or fails before a session is opened.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic

from sqlalchemy import Select

from src.domain.models.entity import TEntity, TKey
from src.domain.models.query import QuerySpec
from src.domain.repositories.base import AsyncRepository, Repository
from src.infrastructure.context import DataContext
from src.infrastructure.persistence.repositories.context import (
    AsyncSqlContextRepository,
    SqlContextRepository,
)


class _EntityBinding(Generic[TEntity]):
    entity_type: type[TEntity]

    def query(self, spec: QuerySpec | None = None) -> Select[Any]:
        return self._repository.query(self.entity_type, spec)  # type: ignore[attr-defined]

    def _check(self, entities: Iterable[Any]) -> None:
        for entity in entities:
            if not isinstance(entity, self.entity_type):
                raise TypeError(
                    f"{type(self).__name__} stores {self.entity_type.__name__}, "
                    f"got {type(entity).__name__}"
                )


class SqlRepository(_EntityBinding[TEntity], Repository[TEntity, TKey]):
    def __init__(
        self, context: DataContext | type[DataContext], entity_type: type[TEntity]
    ) -> None:
        self._repository: SqlContextRepository[DataContext] = SqlContextRepository(context)
        self.entity_type = entity_type

    @property
    def context(self) -> DataContext:
        return self._repository.context

    def list(self, spec: QuerySpec) -> list[TEntity]:
        return self._repository.list(self.entity_type, spec)

    def get(self, key: TKey | Any, include: Any = ()) -> TEntity | None:
        return self._repository.get(self.entity_type, key, include)

    def exists(self, key: TKey | Any) -> bool:
        return self._repository.exists(self.entity_type, key)

    def any(self, predicate: Any = None) -> bool:
        return self._repository.any(self.entity_type, predicate)

    def count(self, predicate: Any = None) -> int:
        return self._repository.count(self.entity_type, predicate)

    def create(self, *entities: TEntity) -> bool:
        self._check(entities)
        return self._repository.create(*entities)

    def update(self, *entities: TEntity) -> bool:
        self._check(entities)
        return self._repository.update(*entities)

    def delete(self, *entities: TEntity) -> bool:
        self._check(entities)
        return self._repository.delete(*entities)


class AsyncSqlRepository(_EntityBinding[TEntity], AsyncRepository[TEntity, TKey]):
    def __init__(
        self, context: DataContext | type[DataContext], entity_type: type[TEntity]
    ) -> None:
        self._repository: AsyncSqlContextRepository[DataContext] = AsyncSqlContextRepository(
            context
        )
        self.entity_type = entity_type

    @property
    def context(self) -> DataContext:
        return self._repository.context

    async def list(self, spec: QuerySpec) -> list[TEntity]:
        return await self._repository.list(self.entity_type, spec)

    async def get(self, key: TKey | Any, include: Any = ()) -> TEntity | None:
        return await self._repository.get(self.entity_type, key, include)

    async def exists(self, key: TKey | Any) -> bool:
        return await self._repository.exists(self.entity_type, key)

    async def any(self, predicate: Any = None) -> bool:
        return await self._repository.any(self.entity_type, predicate)

    async def count(self, predicate: Any = None) -> int:
        return await self._repository.count(self.entity_type, predicate)

    async def create(self, *entities: TEntity) -> bool:
        self._check(entities)
        return await self._repository.create(*entities)

    async def update(self, *entities: TEntity) -> bool:
        self._check(entities)
        return await self._repository.update(*entities)

    async def delete(self, *entities: TEntity) -> bool:
        self._check(entities)
        return await self._repository.delete(*entities)
