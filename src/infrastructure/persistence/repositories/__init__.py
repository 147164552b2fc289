"""Concrete SQLAlchemy repository implementations.

Exports the generic repositories and the get_repositories() /
get_async_repositories() factories that bind one repository per example
entity to a single DataContext.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.infrastructure.context import DataContext
from src.infrastructure.persistence.models.people import Address, Country, Person

from .context import AsyncSqlContextRepository, SqlContextRepository
from .entity import AsyncSqlRepository, SqlRepository
from .people import SqlPersonRepository


@dataclass
class Repositories:
    """Synchronous repositories sharing one DataContext."""

    persons: SqlPersonRepository
    addresses: SqlRepository[Address, int]
    countries: SqlRepository[Country, str]


@dataclass
class AsyncRepositories:
    """Asynchronous repositories sharing one DataContext."""

    persons: AsyncSqlRepository[Person, int]
    addresses: AsyncSqlRepository[Address, int]
    countries: AsyncSqlRepository[Country, str]


def get_repositories(context: DataContext) -> Repositories:
    """Construct all repositories bound to the given context.

        repos = get_repositories(DataContext())
        person = repos.persons.get(person_id, include=["addresses"])
    """
    return Repositories(
        persons=SqlPersonRepository(context),
        addresses=SqlRepository(context, Address),
        countries=SqlRepository(context, Country),
    )


def get_async_repositories(context: DataContext) -> AsyncRepositories:
    return AsyncRepositories(
        persons=AsyncSqlRepository(context, Person),
        addresses=AsyncSqlRepository(context, Address),
        countries=AsyncSqlRepository(context, Country),
    )


__all__ = [
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
