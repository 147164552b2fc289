"""Tests for SqlRepository: synchronous CRUD against SQLite."""

import pytest
from sqlalchemy import Select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import DetachedInstanceError

from src.domain.exceptions import AmbiguousMatchError
from src.infrastructure.persistence.models import Address, Country, Person
from src.infrastructure.persistence.repositories import SqlRepository


def _person(first="Ada", last="Lovelace", email=None, **kwargs):
    return Person(first_name=first, last_name=last, email=email, **kwargs)


@pytest.fixture
def persons(context):
    return SqlRepository(context, Person)


@pytest.fixture
def countries(context):
    return SqlRepository(context, Country)


# --- create / exists / get ---

def test_create_returns_true_and_assigns_key(persons):
    person = _person()
    assert persons.create(person) is True
    assert person.id is not None


def test_exists_after_create(persons):
    person = _person()
    persons.create(person)
    assert persons.exists(person.id) is True


def test_get_returns_entity_equal_by_key(persons):
    person = _person()
    persons.create(person)
    loaded = persons.get(person.id)
    assert loaded.id == person.id
    assert loaded.last_name == "Lovelace"


def test_get_returns_none_when_missing(persons):
    assert persons.get(999) is None


def test_exists_false_when_missing(persons):
    assert persons.exists(999) is False


def test_create_many_in_one_call(persons):
    assert persons.create(_person("A"), _person("B"), _person("C")) is True
    assert persons.count() == 3


def test_insert_is_create(persons):
    assert persons.insert(_person()) is True
    assert persons.count() == 1


def test_create_with_string_key(countries):
    assert countries.create(Country(id="NO", name="Norway")) is True
    assert countries.get("NO").name == "Norway"


def test_create_of_already_stored_entity_reports_failure(persons):
    person = _person()
    persons.create(person)
    person.first_name = "Changed"
    assert persons.create(person) is False
    assert persons.count() == 1
    assert persons.get(person.id).first_name == "Ada"


def test_create_with_no_entities_succeeds(persons):
    assert persons.create() is True


def test_create_rejects_other_entity_type(persons):
    with pytest.raises(TypeError):
        persons.create(Country(id="NO", name="Norway"))


def test_unique_violation_propagates(persons):
    persons.create(_person(email="ada@example.com"))
    with pytest.raises(IntegrityError):
        persons.create(_person("Other", email="ada@example.com"))


# --- get / exists by predicate ---

def test_get_by_expression_predicate(persons):
    persons.create(_person("Grace", "Hopper"), _person())
    assert persons.get(Person.last_name == "Hopper").first_name == "Grace"


def test_get_by_mapping_predicate(persons):
    persons.create(_person("Grace", "Hopper"))
    assert persons.get({"first_name": "Grace"}).last_name == "Hopper"


def test_get_and_exists_reject_empty_mapping(persons):
    persons.create(_person())
    with pytest.raises(ValueError):
        persons.get({})
    with pytest.raises(ValueError):
        persons.exists({})


def test_get_raises_when_predicate_matches_several_rows(persons):
    persons.create(_person("Andrew", "Ng"), _person("Lily", "Ng"))
    with pytest.raises(AmbiguousMatchError):
        persons.get(Person.last_name == "Ng")


def test_exists_by_callable_predicate(persons):
    persons.create(_person("Grace", "Hopper"))
    assert persons.exists(lambda p: p.last_name == "Hopper") is True
    assert persons.exists(lambda p: p.last_name == "Turing") is False


def test_any_without_predicate_reflects_empty_table(persons):
    assert persons.any() is False
    persons.create(_person())
    assert persons.any() is True


def test_count_with_predicate(persons):
    persons.create(_person("Andrew", "Ng"), _person("Lily", "Ng"), _person())
    assert persons.count(Person.last_name == "Ng") == 2


# --- all / find ---

def test_all_without_arguments_returns_every_row(persons):
    persons.create(_person("A"), _person("B"))
    assert sorted(p.first_name for p in persons.all()) == ["A", "B"]


def test_all_sorted_window_returns_third_to_fifth(persons):
    names = ["p4", "p1", "p6", "p0", "p3", "p5", "p2"]
    persons.create(*(_person(first=name) for name in names))
    page = persons.all(order_by=Person.first_name, skip=2, take=3)
    assert [p.first_name for p in page] == ["p2", "p3", "p4"]


def test_all_accepts_order_by_name(persons):
    persons.create(_person("b"), _person("a"))
    assert [p.first_name for p in persons.all(order_by="first_name")] == ["a", "b"]


def test_all_skip_without_take(persons):
    persons.create(*(_person(first=f"p{i}") for i in range(4)))
    assert len(persons.all(order_by="first_name", skip=1)) == 3


def test_all_rejects_negative_take(persons):
    with pytest.raises(ValueError):
        persons.all(take=-1)


def test_find_filters_rows(persons):
    persons.create(_person("Andrew", "Ng"), _person("Lily", "Ng"), _person())
    found = persons.find(Person.last_name == "Ng", order_by="first_name")
    assert [p.first_name for p in found] == ["Andrew", "Lily"]


def test_query_exposes_select(persons):
    assert isinstance(persons.query(), Select)


# --- includes ---

def test_include_loads_relationship(persons):
    person = _person(addresses=[Address(street="1 Main St", city="Oslo")])
    persons.create(person)
    loaded = persons.get(person.id, include=["addresses"])
    assert [a.city for a in loaded.addresses] == ["Oslo"]


def test_relationship_not_loaded_without_include(persons):
    person = _person(addresses=[Address(street="1 Main St", city="Oslo")])
    persons.create(person)
    loaded = persons.get(person.id)
    with pytest.raises(DetachedInstanceError):
        loaded.addresses


def test_nested_include_loads_whole_path(persons, countries):
    countries.create(Country(id="NO", name="Norway"))
    person = _person(addresses=[Address(street="1 Main St", city="Oslo", country_id="NO")])
    persons.create(person)
    loaded = persons.all(include="addresses.country")[0]
    assert loaded.addresses[0].country.name == "Norway"


# --- update ---

def test_update_persists_changes(persons):
    person = _person()
    persons.create(person)
    person.first_name = "Augusta"
    assert persons.update(person) is True
    assert persons.get(person.id).first_name == "Augusta"


def test_update_of_missing_key_fails_without_inserting(persons):
    ghost = _person(id=999)
    assert persons.update(ghost) is False
    assert persons.exists(999) is False
    assert persons.count() == 0


def test_update_of_unsaved_entity_fails(persons):
    assert persons.update(_person()) is False


def test_partial_update_reports_failure_but_keeps_successes(persons):
    person = _person()
    persons.create(person)
    person.first_name = "Augusta"
    assert persons.update(person, _person(id=999)) is False
    assert persons.get(person.id).first_name == "Augusta"


# --- delete ---

def test_delete_then_exists_false(persons):
    person = _person()
    persons.create(person)
    assert persons.delete(person) is True
    assert persons.exists(person.id) is False


def test_delete_missing_entity_returns_false(persons):
    assert persons.delete(_person(id=42)) is False


def test_delete_cascades_to_addresses(context, persons):
    addresses = SqlRepository(context, Address)
    person = _person(addresses=[Address(street="1 Main St", city="Oslo")])
    persons.create(person)
    assert addresses.count() == 1
    persons.delete(person)
    assert addresses.count() == 0
