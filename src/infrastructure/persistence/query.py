"""Translate QuerySpec descriptors into SQLAlchemy statements.

Include paths become selectinload() chains so that relationships are
populated before the session closes; lazy loading on a detached instance
(or under AsyncSession) would otherwise fail.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import ColumnElement, Select, and_, func, inspect, select
from sqlalchemy.orm import QueryableAttribute, RelationshipProperty, selectinload
from sqlalchemy.sql.base import ExecutableOption
from sqlalchemy.sql.elements import ClauseElement

from src.domain.models.query import QuerySpec


def primary_key_attribute(entity_type: type) -> QueryableAttribute[Any]:
    """Return the mapped attribute of entity_type's single primary-key column."""
    mapper = inspect(entity_type)
    if len(mapper.primary_key) != 1:
        raise ValueError(
            f"{entity_type.__name__} has a composite primary key; "
            "use a predicate instead of a key"
        )
    prop = mapper.get_property_by_column(mapper.primary_key[0])
    return getattr(entity_type, prop.key)


def primary_key_of(entity: object) -> Any:
    """Return the primary-key value of a mapped instance (None if unset)."""
    mapper = inspect(type(entity))
    if len(mapper.primary_key) != 1:
        raise ValueError(f"{type(entity).__name__} has a composite primary key")
    return mapper.primary_key_from_instance(entity)[0]


def resolve_attribute(entity_type: type, name: str) -> QueryableAttribute[Any]:
    if name not in inspect(entity_type).attrs:
        raise ValueError(f"{entity_type.__name__} has no attribute {name!r}")
    return getattr(entity_type, name)


def is_predicate(value: Any) -> bool:
    """True for anything resolve_predicate() accepts; False for plain key values."""
    return isinstance(value, (ClauseElement, QueryableAttribute, Mapping)) or callable(value)


def resolve_predicate(entity_type: type, predicate: Any) -> ColumnElement[bool] | None:
    if predicate is None:
        return None
    if isinstance(predicate, (ClauseElement, QueryableAttribute)):
        return predicate  # type: ignore[return-value]
    if isinstance(predicate, Mapping):
        if not predicate:
            return None
        return and_(
            *(resolve_attribute(entity_type, name) == value for name, value in predicate.items())
        )
    if callable(predicate):
        return predicate(entity_type)
    raise TypeError(f"Unsupported predicate type: {type(predicate).__name__}")


def resolve_order(entity_type: type, key: Any) -> Any:
    if isinstance(key, str):
        return resolve_attribute(entity_type, key)
    return key


def resolve_include(entity_type: type, path: Any) -> ExecutableOption:
    """Turn one include path into a loader option."""
    if isinstance(path, ExecutableOption):
        return path
    if isinstance(path, QueryableAttribute):
        if not isinstance(path.property, RelationshipProperty):
            raise ValueError(f"{path} is not a relationship")
        return selectinload(path)
    if not isinstance(path, str):
        raise TypeError(f"Unsupported include path type: {type(path).__name__}")

    loader = None
    current = entity_type
    for segment in path.split("."):
        relationships = inspect(current).relationships
        if segment not in relationships:
            raise ValueError(f"{current.__name__} has no relationship {segment!r}")
        attr = getattr(current, segment)
        loader = selectinload(attr) if loader is None else loader.selectinload(attr)
        current = relationships[segment].mapper.class_
    assert loader is not None
    return loader


def where_clause(entity_type: type, key_or_predicate: Any) -> ColumnElement[bool] | None:
    """Clause selecting one row by key or predicate, as used by get() and exists()."""
    if isinstance(key_or_predicate, Mapping) and not key_or_predicate:
        raise ValueError(f"Empty mapping does not identify a {entity_type.__name__}")
    if is_predicate(key_or_predicate):
        return resolve_predicate(entity_type, key_or_predicate)
    return primary_key_attribute(entity_type) == key_or_predicate


def build_query(entity_type: type, spec: QuerySpec) -> Select[Any]:
    stmt = select(entity_type)

    options = [resolve_include(entity_type, path) for path in spec.include]
    if options:
        stmt = stmt.options(*options)

    criteria = [
        clause
        for clause in (resolve_predicate(entity_type, p) for p in spec.predicates)
        if clause is not None
    ]
    if criteria:
        stmt = stmt.where(*criteria)

    order = resolve_order(entity_type, spec.order_by)
    if order is not None:
        stmt = stmt.order_by(order)

    if spec.skip is not None:
        stmt = stmt.offset(spec.skip)
    if spec.take is not None:
        stmt = stmt.limit(spec.take)
    return stmt


def build_exists(entity_type: type, criteria: ColumnElement[bool] | None) -> Select[Any]:
    inner = select(entity_type)
    if criteria is not None:
        inner = inner.where(criteria)
    return select(inner.exists())


def build_count(entity_type: type, criteria: ColumnElement[bool] | None) -> Select[Any]:
    stmt = select(func.count()).select_from(entity_type)
    if criteria is not None:
        stmt = stmt.where(criteria)
    return stmt
