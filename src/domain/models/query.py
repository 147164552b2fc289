"""Query descriptor.

A QuerySpec is an immutable description of one read: predicates (AND-ed),
an optional ascending sort key, an optional skip/take window and the
related-entity include paths to eager-load.  It carries no persistence
logic; src/infrastructure/persistence/query.py translates it into a
SQLAlchemy Select.

Predicates, sort keys and include paths are opaque here.  The translator
accepts column expressions, callables taking the entity class, attribute
name mappings, relationship attributes and dotted relationship names.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QuerySpec(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    predicates: tuple[Any, ...] = ()
    order_by: Any = None
    skip: int | None = Field(default=None, ge=0)
    take: int | None = Field(default=None, ge=0)
    include: tuple[Any, ...] = ()

    @classmethod
    def of(
        cls,
        predicate: Any = None,
        order_by: Any = None,
        skip: int | None = None,
        take: int | None = None,
        include: Any = (),
    ) -> QuerySpec:
        """Build a spec from the keyword arguments the repositories accept."""
        return cls(
            predicates=() if predicate is None else (predicate,),
            order_by=order_by,
            skip=skip,
            take=take,
            include=_as_tuple(include),
        )

    def where(self, predicate: Any) -> QuerySpec:
        return self._replace(predicates=self.predicates + (predicate,))

    def ordered_by(self, key: Any) -> QuerySpec:
        return self._replace(order_by=key)

    def window(self, skip: int | None = None, take: int | None = None) -> QuerySpec:
        return self._replace(skip=skip, take=take)

    def including(self, *paths: Any) -> QuerySpec:
        return self._replace(include=self.include + paths)

    def _replace(self, **changes: Any) -> QuerySpec:
        # model_copy() skips validation; rebuild so skip/take bounds still hold.
        return type(self)(**{**dict(self), **changes})


def _as_tuple(include: Any) -> tuple[Any, ...]:
    if include is None:
        return ()
    if isinstance(include, (str, bytes)) or not isinstance(include, (list, tuple, set, frozenset)):
        return (include,)
    return tuple(include)
