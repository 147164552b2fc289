"""Person repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import Any

from src.domain.models.entity import TEntity

from .base import Repository


class PersonRepository(Repository[TEntity, int]):
    """Read/write interface for persons.

    get_persons takes any predicate the generic repository accepts; the
    service layer passes attribute mappings so it stays free of ORM imports.
    """

    @abstractmethod
    def get_persons(self, predicate: Any = None) -> list[TEntity]:
        """Return persons matching predicate, ordered by key."""

    @abstractmethod
    def get_persons_by_last_name(self, last_name: str) -> list[TEntity]:
        """Return persons with the given last name, ordered by key."""

    @abstractmethod
    def create_person(self, person: TEntity) -> bool:
        """Insert a person and commit."""

    @abstractmethod
    def update_person(self, person: TEntity) -> bool:
        """Persist changes to an existing person.  False if the key is unknown."""

    @abstractmethod
    def delete_person(self, person: TEntity) -> bool:
        """Remove a person (and their addresses)."""
