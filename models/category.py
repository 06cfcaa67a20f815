"""Category model for the category hierarchy."""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple
from models.entity import EntityRef


@dataclass
class Category:
    """Represents a node in the category tree.

    Attributes:
        name: Display name (must not be blank when stored).
        description: Optional description of what belongs in this category.
        parent_key: Key of the parent category, or None for a root.
        entity: Key and version, assigned at construction.
    """

    name: str
    description: Optional[str] = None
    parent_key: Optional[str] = None
    entity: EntityRef = field(default_factory=EntityRef)

    @property
    def key(self) -> str:
        return self.entity.key

    @property
    def version(self) -> int:
        return self.entity.version

    @property
    def is_root(self) -> bool:
        return self.parent_key is None

    def to_dict(self) -> dict:
        """Convert category to dictionary for storage and display."""
        return {
            "key": self.key,
            "version": self.version,
            "name": self.name,
            "description": self.description,
            "parent_key": self.parent_key,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        """Build a category from a dictionary produced by to_dict()."""
        return cls(
            name=data["name"],
            description=data.get("description"),
            parent_key=data.get("parent_key"),
            entity=EntityRef(key=data["key"], version=data.get("version", 0)),
        )


@dataclass(frozen=True)
class FieldSpec:
    """Statically declared category property.

    A field without a writer is read-only.
    """

    name: str
    type: type
    reader: Callable[[Category], Any]
    writer: Optional[Callable[[Category, Any], None]] = None

    @property
    def read_only(self) -> bool:
        return self.writer is None


def _setter(attr: str) -> Callable[[Category, Any], None]:
    def write(category: Category, value: Any) -> None:
        setattr(category, attr, value)

    return write


CATEGORY_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("key", str, lambda c: c.key),
    FieldSpec("version", int, lambda c: c.version),
    FieldSpec("name", str, lambda c: c.name, _setter("name")),
    FieldSpec("description", str, lambda c: c.description, _setter("description")),
    FieldSpec("parent_key", str, lambda c: c.parent_key, _setter("parent_key")),
)

_FIELDS_BY_NAME = {spec.name: spec for spec in CATEGORY_FIELDS}


def field_names() -> Tuple[str, ...]:
    """Names of all category fields in declaration order."""
    return tuple(spec.name for spec in CATEGORY_FIELDS)


def get_field(name: str) -> Optional[FieldSpec]:
    """Look up a field by name, or None if no such field exists."""
    return _FIELDS_BY_NAME.get(name)


def read_field(category: Category, name: str) -> Any:
    """Read a field value from a category.

    Raises:
        KeyError: If the field name is unknown.
    """
    return _FIELDS_BY_NAME[name].reader(category)


def write_field(category: Category, name: str, value: Any) -> None:
    """Write a field value on a category.

    Raises:
        KeyError: If the field name is unknown.
        AttributeError: If the field is read-only.
    """
    spec = _FIELDS_BY_NAME[name]
    if spec.writer is None:
        raise AttributeError(f"Field '{name}' is read-only")
    spec.writer(category, value)
