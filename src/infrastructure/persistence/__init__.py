"""Persistence package.

Importing this package registers every ORM mapper with Base.metadata
(required for Alembic autogenerate and metadata.create_all) and exports the
repository implementations and the factory functions.
"""

from src.infrastructure.persistence.models import *  # noqa: F401, F403
from src.infrastructure.persistence.models import __all__ as _orm_all
from src.infrastructure.persistence.repositories import (
    AsyncRepositories,
    AsyncSqlContextRepository,
    AsyncSqlRepository,
    Repositories,
    SqlContextRepository,
    SqlPersonRepository,
    SqlRepository,
    get_async_repositories,
    get_repositories,
)

__all__ = _orm_all + [
    "SqlContextRepository",
    "AsyncSqlContextRepository",
    "SqlRepository",
    "AsyncSqlRepository",
    "SqlPersonRepository",
    "Repositories",
    "AsyncRepositories",
    "get_repositories",
    "get_async_repositories",
]
