"""Person lookups built on PersonRepository."""

from __future__ import annotations

from typing import Any

from src.domain.repositories.people import PersonRepository


class PersonService:
    def __init__(self, repository: PersonRepository[Any]) -> None:
        self._repository = repository

    def get_persons_by_last_name(self, last_name: str) -> list[Any]:
        return self._repository.get_persons({"last_name": last_name})
