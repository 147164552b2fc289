"""Entity mixin: the mapped counterpart of the Identifiable contract."""

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column


class Entity:
    """Declarative mixin adding an integer surrogate key named ``id``.

    Models with a natural key (see Country) skip the mixin and declare their
    own single-column primary key; the repositories only require that there
    is exactly one.
    """

    id: Mapped[int] = mapped_column(primary_key=True)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"
