"""Identity and version data shared by all entities."""

import uuid
from dataclasses import dataclass, field, replace


def new_key() -> str:
    """Generate a fresh, globally unique entity key."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class EntityRef:
    """Immutable identity of a stored entity.

    Attributes:
        key: Surrogate key assigned when the entity is constructed.
        version: Optimistic-locking counter maintained by the persistence layer.
    """

    key: str = field(default_factory=new_key)
    version: int = 0

    def next_version(self) -> "EntityRef":
        """Return a copy with the version counter incremented."""
        return replace(self, version=self.version + 1)
