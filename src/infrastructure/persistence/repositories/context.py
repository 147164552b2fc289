"""SQLAlchemy implementation of ContextRepository / AsyncContextRepository.

Every public method opens its own session from the DataContext, runs one
operation and closes the session.  Mutations commit before returning and
report success as ``affected >= submitted``, where affected counts:

  create  transient entities that became persistent in the flush
          (already-stored entities never join the session, so they are
          neither inserted nor updated)
  update  entities whose primary key matched a stored row (merged)
  delete  entities whose primary key matched a stored row (deleted)

update() never inserts, and neither update() nor delete() raises for a
missing key; the miss only shows up as a False result.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import Select, inspect
from sqlalchemy.exc import MultipleResultsFound

from src.domain.exceptions import AmbiguousMatchError
from src.domain.models.entity import TEntity
from src.domain.models.query import QuerySpec
from src.domain.repositories.context import AsyncContextRepository, ContextRepository
from src.infrastructure.context import DataContext
from src.infrastructure.persistence.query import (
    build_count,
    build_exists,
    build_query,
    primary_key_of,
    resolve_predicate,
    where_clause,
)

logger = logging.getLogger(__name__)

TDataContext = TypeVar("TDataContext", bound=DataContext)


def _instantiate(context: TDataContext | type[TDataContext]) -> TDataContext:
    return context() if isinstance(context, type) else context


def _key_query(entity_type: type, key: Any, include: Any) -> Select[Any]:
    return build_query(entity_type, QuerySpec.of(where_clause(entity_type, key), include=include))


def _report(operation: str, affected: int, entities: Sequence[Any]) -> bool:
    if affected < len(entities):
        logger.warning(
            "%s affected %d of %d submitted entities", operation, affected, len(entities)
        )
        return False
    logger.debug("%s affected %d entities", operation, affected)
    return True


class SqlContextRepository(ContextRepository[TDataContext]):
    def __init__(self, context: TDataContext | type[TDataContext]) -> None:
        self._context = _instantiate(context)

    @property
    def context(self) -> TDataContext:
        return self._context

    def query(self, entity_type: type, spec: QuerySpec | None = None) -> Select[Any]:
        return build_query(entity_type, spec or QuerySpec())

    def list(self, entity_type: type[TEntity], spec: QuerySpec) -> list[TEntity]:
        stmt = build_query(entity_type, spec)
        with self._context.session() as session:
            return [*session.scalars(stmt).all()]

    def get(self, entity_type: type[TEntity], key: Any, include: Any = ()) -> TEntity | None:
        stmt = _key_query(entity_type, key, include)
        with self._context.session() as session:
            try:
                return session.scalars(stmt).one_or_none()
            except MultipleResultsFound as exc:
                raise AmbiguousMatchError(entity_type, key) from exc

    def exists(self, entity_type: type, key: Any) -> bool:
        stmt = build_exists(entity_type, where_clause(entity_type, key))
        with self._context.session() as session:
            return bool(session.scalar(stmt))

    def any(self, entity_type: type, predicate: Any = None) -> bool:
        stmt = build_exists(entity_type, resolve_predicate(entity_type, predicate))
        with self._context.session() as session:
            return bool(session.scalar(stmt))

    def count(self, entity_type: type, predicate: Any = None) -> int:
        stmt = build_count(entity_type, resolve_predicate(entity_type, predicate))
        with self._context.session() as session:
            return session.scalar(stmt) or 0

    def create(self, *entities: Any) -> bool:
        staged = [entity for entity in entities if inspect(entity).transient]
        with self._context.session() as session:
            session.add_all(staged)
            session.flush()
            affected = sum(1 for entity in staged if inspect(entity).persistent)
            session.commit()
        return _report("create", affected, entities)

    def update(self, *entities: Any) -> bool:
        affected = 0
        with self._context.session() as session:
            for entity in entities:
                key = primary_key_of(entity)
                if key is None or session.get(type(entity), key) is None:
                    continue
                session.merge(entity)
                affected += 1
            session.commit()
        return _report("update", affected, entities)

    def delete(self, *entities: Any) -> bool:
        affected = 0
        with self._context.session() as session:
            for entity in entities:
                key = primary_key_of(entity)
                stored = session.get(type(entity), key) if key is not None else None
                if stored is None:
                    continue
                session.delete(stored)
                affected += 1
            session.commit()
        return _report("delete", affected, entities)


class AsyncSqlContextRepository(AsyncContextRepository[TDataContext]):
    def __init__(self, context: TDataContext | type[TDataContext]) -> None:
        self._context = _instantiate(context)

    @property
    def context(self) -> TDataContext:
        return self._context

    def query(self, entity_type: type, spec: QuerySpec | None = None) -> Select[Any]:
        return build_query(entity_type, spec or QuerySpec())

    async def list(self, entity_type: type[TEntity], spec: QuerySpec) -> list[TEntity]:
        stmt = build_query(entity_type, spec)
        async with self._context.async_session() as session:
            result = await session.scalars(stmt)
            return [*result.all()]

    async def get(
        self, entity_type: type[TEntity], key: Any, include: Any = ()
    ) -> TEntity | None:
        stmt = _key_query(entity_type, key, include)
        async with self._context.async_session() as session:
            result = await session.scalars(stmt)
            try:
                return result.one_or_none()
            except MultipleResultsFound as exc:
                raise AmbiguousMatchError(entity_type, key) from exc

    async def exists(self, entity_type: type, key: Any) -> bool:
        stmt = build_exists(entity_type, where_clause(entity_type, key))
        async with self._context.async_session() as session:
            return bool(await session.scalar(stmt))

    async def any(self, entity_type: type, predicate: Any = None) -> bool:
        stmt = build_exists(entity_type, resolve_predicate(entity_type, predicate))
        async with self._context.async_session() as session:
            return bool(await session.scalar(stmt))

    async def count(self, entity_type: type, predicate: Any = None) -> int:
        stmt = build_count(entity_type, resolve_predicate(entity_type, predicate))
        async with self._context.async_session() as session:
            return (await session.scalar(stmt)) or 0

    async def create(self, *entities: Any) -> bool:
        staged = [entity for entity in entities if inspect(entity).transient]
        async with self._context.async_session() as session:
            session.add_all(staged)
            await session.flush()
            affected = sum(1 for entity in staged if inspect(entity).persistent)
            await session.commit()
        return _report("create", affected, entities)

    async def update(self, *entities: Any) -> bool:
        affected = 0
        async with self._context.async_session() as session:
            for entity in entities:
                key = primary_key_of(entity)
                if key is None or await session.get(type(entity), key) is None:
                    continue
                await session.merge(entity)
                affected += 1
            await session.commit()
        return _report("update", affected, entities)

    async def delete(self, *entities: Any) -> bool:
        affected = 0
        async with self._context.async_session() as session:
            for entity in entities:
                key = primary_key_of(entity)
                stored = await session.get(type(entity), key) if key is not None else None
                if stored is None:
                    continue
                await session.delete(stored)
                affected += 1
            await session.commit()
        return _report("delete", affected, entities)
