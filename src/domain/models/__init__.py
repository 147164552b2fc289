"""Domain model package.

Holds the persistence-agnostic pieces of the repository layer: the entity
contract and the query descriptor.  Import from this package to avoid
coupling callers to individual module paths.
"""

from .entity import Identifiable, TEntity, TKey
from .query import QuerySpec

__all__ = [
    "Identifiable",
    "TEntity",
    "TKey",
    "QuerySpec",
]
