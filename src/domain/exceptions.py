"""Repository error types.

Only failures the repository itself detects live here.  Driver and ORM
errors (IntegrityError, OperationalError, ...) propagate unchanged.
"""


class RepositoryError(Exception):
    """Base class for repository-level failures."""


class AmbiguousMatchError(RepositoryError):
    """A single-entity lookup matched more than one row."""

    def __init__(self, entity_type: type, criteria: object) -> None:
        self.entity_type = entity_type
        self.criteria = criteria
        super().__init__(
            f"More than one {entity_type.__name__} matched {criteria!r}; expected at most one"
        )
