"""ORM model registry. Imports every model module so each mapper class is
registered with Base.metadata before Alembic or SQLAlchemy runs.
"""

from src.infrastructure.persistence.models.base import Entity
from src.infrastructure.persistence.models.people import Address, Country, Person

__all__ = [
    "Entity",
    "Country",
    "Person",
    "Address",
]
