"""Domain repository interfaces.

All abstractions are defined here with abc.ABC and @abstractmethod.
Concrete implementations live in src/infrastructure/persistence/ and are
wired at the application boundary.

Import from this package rather than individual modules to avoid coupling
callers to specific repository module paths.
"""

from .base import AsyncRepository, Repository
from .context import AsyncContextRepository, ContextRepository
from .people import PersonRepository

__all__ = [
    "Repository",
    "AsyncRepository",
    "ContextRepository",
    "AsyncContextRepository",
    "PersonRepository",
]
