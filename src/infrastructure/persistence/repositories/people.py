"""SQLAlchemy implementation of PersonRepository."""

from __future__ import annotations

from typing import Any

from src.domain.repositories.people import PersonRepository
from src.infrastructure.context import DataContext
from src.infrastructure.persistence.models.people import Person
from src.infrastructure.persistence.repositories.entity import SqlRepository


class SqlPersonRepository(SqlRepository[Person, int], PersonRepository[Person]):
    def __init__(self, context: DataContext | type[DataContext]) -> None:
        super().__init__(context, Person)

    def get_persons(self, predicate: Any = None) -> list[Person]:
        return self.all(predicate, order_by=Person.id)

    def get_persons_by_last_name(self, last_name: str) -> list[Person]:
        return self.get_persons(Person.last_name == last_name)

    def create_person(self, person: Person) -> bool:
        return self.create(person)

    def update_person(self, person: Person) -> bool:
        return self.update(person)

    def delete_person(self, person: Person) -> bool:
        return self.delete(person)
