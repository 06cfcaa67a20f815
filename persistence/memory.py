"""In-process category storage, used for tests and UI prototyping."""

from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterable, List, Optional
from exceptions import DataIntegrityError, NotFoundError, OptimisticLockError
from models.category import Category
from persistence.base import CategoryRepository


class _Entry:
    __slots__ = ("category", "children")

    def __init__(self, category: Category):
        self.category = category
        self.children: List[str] = []


class MemoryCategoryRepository(CategoryRepository):
    """Dictionary-backed repository.

    Records are stored and handed out as copies, so editing a fetched category
    changes nothing until it is merged. The parent each key was last filed
    under is tracked separately so that merge() can tell when parent_key
    changed.
    """

    def __init__(self):
        self._entries: Dict[str, _Entry] = {}
        self._roots: List[str] = []
        self._parent_of: Dict[str, Optional[str]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _child_list(self, parent_key: Optional[str]) -> List[str]:
        if parent_key is None:
            return self._roots
        return self._entries[parent_key].children

    def _ordered(self, keys: Iterable[str]) -> List[Category]:
        # sorted() is stable, so equal names keep insertion order
        categories = (replace(self._entries[key].category) for key in keys)
        return sorted(categories, key=lambda c: c.name)

    def _check_parent(self, category: Category) -> None:
        if category.parent_key is not None and category.parent_key not in self._entries:
            raise DataIntegrityError(
                f"Parent category {category.parent_key} does not exist",
                key=category.key,
            )

    def find_by_key(self, key: str) -> Optional[Category]:
        entry = self._entries.get(key)
        return replace(entry.category) if entry else None

    def find_by_parent(self, parent_key: str) -> List[Category]:
        entry = self._entries.get(parent_key)
        if entry is None:
            return []
        return self._ordered(entry.children)

    def find_roots(self) -> List[Category]:
        return self._ordered(self._roots)

    def persist(self, category: Category) -> None:
        if category.key in self._entries:
            raise DataIntegrityError(
                f"Category {category.key} already exists", key=category.key
            )
        self._check_parent(category)

        self._entries[category.key] = _Entry(replace(category))
        self._child_list(category.parent_key).append(category.key)
        self._parent_of[category.key] = category.parent_key

    def merge(self, category: Category) -> Category:
        entry = self._entries.get(category.key)
        if entry is None:
            raise NotFoundError(
                f"Category {category.key} not found", key=category.key
            )
        if entry.category.version != category.version:
            raise OptimisticLockError(
                f"Category {category.key} was modified concurrently", key=category.key
            )
        self._check_parent(category)

        old_parent = self._parent_of[category.key]
        if old_parent != category.parent_key:
            self._child_list(old_parent).remove(category.key)
            self._child_list(category.parent_key).append(category.key)
            self._parent_of[category.key] = category.parent_key

        entry.category = replace(category, entity=category.entity.next_version())
        category.entity = entry.category.entity
        return category

    def remove(self, category: Category) -> None:
        entry = self._entries.get(category.key)
        if entry is None:
            return
        if entry.children:
            raise DataIntegrityError(
                f"Category {category.key} still has children", key=category.key
            )

        self._child_list(self._parent_of.pop(category.key)).remove(category.key)
        del self._entries[category.key]

    @contextmanager
    def transaction(self):
        # Every call above completes synchronously; nothing to stage.
        yield self
