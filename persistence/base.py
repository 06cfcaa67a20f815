"""Base interface for category persistence backends."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import List, Optional
from models.category import Category


class CategoryRepository(ABC):
    """Abstract base class for category storage.

    A repository stores records and keeps the parent/children index; it does
    not enforce hierarchy rules such as acyclicity. Those belong to
    CategoryStore, which is the only intended caller.
    """

    @abstractmethod
    def find_by_key(self, key: str) -> Optional[Category]:
        """Get a category by key, or None if not stored."""
        pass

    @abstractmethod
    def find_by_parent(self, parent_key: str) -> List[Category]:
        """Get the direct children of a category, ordered by name."""
        pass

    @abstractmethod
    def find_roots(self) -> List[Category]:
        """Get all categories without a parent, ordered by name."""
        pass

    @abstractmethod
    def persist(self, category: Category) -> None:
        """Store a new category.

        Raises:
            DataIntegrityError: If the key is taken or the parent is missing.
        """
        pass

    @abstractmethod
    def merge(self, category: Category) -> Category:
        """Write the fields of an already stored category and bump its version.

        If the parent changed, the category moves to the new parent's child
        index (or the root index).

        Raises:
            NotFoundError: If the category is not stored.
            OptimisticLockError: If the stored version differs from category.version.
            DataIntegrityError: If the new parent is missing.
        """
        pass

    @abstractmethod
    def remove(self, category: Category) -> None:
        """Delete a stored category. Removing an absent category does nothing.

        Raises:
            DataIntegrityError: If the category still has children.
        """
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Group several calls so they are applied together or not at all."""
        pass
