"""Example entity set: countries, persons and their addresses."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database import Base
from src.infrastructure.persistence.models.base import Entity


class Country(Base):
    """Reference data keyed by ISO 3166-1 alpha-2 code."""

    __tablename__ = "countries"

    id: Mapped[str] = mapped_column(String(2), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    addresses: Mapped[list["Address"]] = relationship(back_populates="country")

    def __repr__(self) -> str:
        return f"Country(id={self.id!r})"


class Person(Entity, Base):
    __tablename__ = "persons"
    __table_args__ = (UniqueConstraint("email", name="uq_persons_email"),)

    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    addresses: Mapped[list["Address"]] = relationship(
        back_populates="person", cascade="all, delete-orphan"
    )


class Address(Entity, Base):
    __tablename__ = "addresses"

    person_id: Mapped[int] = mapped_column(
        ForeignKey("persons.id", ondelete="CASCADE"), nullable=False
    )
    country_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("countries.id"), nullable=True
    )
    street: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(Text, nullable=False)

    person: Mapped["Person"] = relationship(back_populates="addresses")
    country: Mapped[Optional["Country"]] = relationship(back_populates="addresses")
