"""Tests for AsyncSqlRepository: async CRUD and concurrent access against SQLite."""

import asyncio

import pytest

from src.domain.exceptions import AmbiguousMatchError
from src.infrastructure.persistence.models import Address, Person
from src.infrastructure.persistence.repositories import AsyncSqlRepository


def _person(first="Ada", last="Lovelace", **kwargs):
    return Person(first_name=first, last_name=last, **kwargs)


@pytest.fixture
def persons(async_context):
    return AsyncSqlRepository(async_context, Person)


async def test_create_then_get_returns_entity_equal_by_key(persons):
    person = _person()
    assert await persons.create(person) is True
    loaded = await persons.get(person.id)
    assert loaded.id == person.id


async def test_exists_after_create_and_not_after_delete(persons):
    person = _person()
    await persons.create(person)
    assert await persons.exists(person.id) is True
    assert await persons.delete(person) is True
    assert await persons.exists(person.id) is False


async def test_get_raises_when_predicate_matches_several_rows(persons):
    await persons.create(_person("Andrew", "Ng"), _person("Lily", "Ng"))
    with pytest.raises(AmbiguousMatchError):
        await persons.get({"last_name": "Ng"})


async def test_create_of_already_stored_entity_leaves_row_unchanged(persons):
    person = _person()
    await persons.create(person)
    person.first_name = "Changed"
    assert await persons.create(person) is False
    assert await persons.count() == 1
    assert (await persons.get(person.id)).first_name == "Ada"


async def test_get_with_empty_mapping_is_rejected(persons):
    await persons.create(_person())
    with pytest.raises(ValueError):
        await persons.get({})


async def test_update_of_missing_key_fails_without_inserting(persons):
    assert await persons.update(_person(id=999)) is False
    assert await persons.count() == 0


async def test_update_persists_changes(persons):
    person = _person()
    await persons.create(person)
    person.last_name = "King"
    assert await persons.update(person) is True
    assert (await persons.get(person.id)).last_name == "King"


async def test_all_sorted_window_returns_third_to_fifth(persons):
    await persons.create(*(_person(first=f"p{i}") for i in (3, 0, 6, 1, 5, 2, 4)))
    page = await persons.all(order_by=Person.first_name, skip=2, take=3)
    assert [p.first_name for p in page] == ["p2", "p3", "p4"]


async def test_find_with_include_loads_relationship(persons):
    await persons.create(_person(addresses=[Address(street="1 Main St", city="Oslo")]))
    found = await persons.find(Person.last_name == "Lovelace", include="addresses")
    assert found[0].addresses[0].city == "Oslo"


async def test_any_and_count(persons):
    assert await persons.any() is False
    await persons.insert(_person(), _person("Grace", "Hopper"))
    assert await persons.any(Person.last_name == "Hopper") is True
    assert await persons.count() == 2


async def test_delete_missing_entity_returns_false(persons):
    assert await persons.delete(_person(id=5)) is False


async def test_create_rejects_other_entity_type(persons):
    with pytest.raises(TypeError):
        await persons.create(Address(street="x", city="y"))


# --- concurrency: one session per call ---

async def test_concurrent_creates_for_distinct_keys_both_succeed(persons):
    first, second = _person("A", "One"), _person("B", "Two")
    results = await asyncio.gather(persons.create(first), persons.create(second))
    assert results == [True, True]
    assert first.id != second.id
    assert await persons.exists(first.id) and await persons.exists(second.id)


async def test_concurrent_updates_of_one_key_are_last_commit_wins(persons):
    # Not serialized by the repository: both succeed and one write survives.
    person = _person()
    await persons.create(person)
    left = _person("Left", id=person.id)
    right = _person("Right", id=person.id)

    results = await asyncio.gather(persons.update(left), persons.update(right))

    assert results == [True, True]
    assert (await persons.get(person.id)).first_name in {"Left", "Right"}
