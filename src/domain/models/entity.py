"""Entity marker contract.

Repositories only need one thing from an entity: a single identifying
attribute that can be compared for equality.  Mapped classes satisfy this
structurally; nothing has to inherit from Identifiable.

Keys only need to be hashable, not orderable: lookups compare keys for
equality and ordering is always an explicit order_by on a column.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Protocol, TypeVar, runtime_checkable

TKey = TypeVar("TKey", bound=Hashable)
TEntity = TypeVar("TEntity")


@runtime_checkable
class Identifiable(Protocol):
    """Anything with an ``id`` attribute."""

    id: Any
