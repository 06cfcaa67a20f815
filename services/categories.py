"""Category store: hierarchy operations over a category repository."""

from typing import List, Optional
from dataclasses import replace
from exceptions import (
    DuplicateKeyError,
    InvalidParentError,
    NotFoundError,
    OptimisticLockError,
)
from models.category import Category
from persistence.base import CategoryRepository
from logger import get_logger

logger = get_logger()


class CategoryStore:
    """Service for managing the category hierarchy.

    The store is the single source of truth for categories and checks the
    structural rules on every mutation: parents must exist, no category may
    become its own ancestor, and deleting a category hands its children to
    its parent.

    Updates are strict: update() never inserts, and insert() never overwrites.

    The store is not synchronized. Callers sharing one store between threads
    must serialize mutations and TreeCache reads themselves.

    Args:
        repository: Persistence backend holding the records.
    """

    def __init__(self, repository: CategoryRepository):
        self.repository = repository

    def get_root_categories(self) -> List[Category]:
        """Get all categories without a parent.

        Returns:
            List of root categories ordered by name (empty if there are none).
        """
        logger.debug("Retrieving root categories")
        result = self.repository.find_roots()
        logger.debug(f"Found {len(result)} root categories")
        return result

    def get_children(self, parent_key: str) -> List[Category]:
        """Get the direct children of a category.

        Args:
            parent_key: Key of the parent category.

        Returns:
            List of child categories ordered by name.

        Raises:
            NotFoundError: If parent_key does not identify a stored category.
        """
        logger.debug(f"Retrieving children for category {parent_key}")
        self.get_by_key(parent_key)
        result = self.repository.find_by_parent(parent_key)
        logger.debug(f"Found {len(result)} children")
        return result

    def get_by_key(self, key: str) -> Category:
        """Get a single category by key.

        Raises:
            NotFoundError: If no category has this key.
        """
        category = self.repository.find_by_key(key)
        if category is None:
            raise NotFoundError(f"Category {key} not found", key=key)
        return category

    def find(self, key: str) -> Optional[Category]:
        """Get a single category by key, or None if not found."""
        return self.repository.find_by_key(key)

    def ancestors(self, key: str) -> List[Category]:
        """Get the parent chain of a category, nearest parent first.

        Raises:
            NotFoundError: If key does not identify a stored category.
        """
        chain = []
        current = self.get_by_key(key)
        while current.parent_key is not None:
            current = self.get_by_key(current.parent_key)
            chain.append(current)
        return chain

    def insert(self, category: Category) -> Category:
        """Insert a new category.

        Args:
            category: Category to store. Its key was assigned at construction.

        Returns:
            The stored category.

        Raises:
            ValueError: If the name is blank.
            DuplicateKeyError: If a category with the same key is stored.
            InvalidParentError: If parent_key does not identify a stored category.
        """
        logger.debug(f"Inserting category {category.key} ({category.name!r})")
        _check_name(category)

        if self.repository.find_by_key(category.key) is not None:
            logger.debug(f"Cannot insert category {category.key}: already exists")
            raise DuplicateKeyError(
                f"Category {category.key} already exists", key=category.key
            )
        if (
            category.parent_key is not None
            and self.repository.find_by_key(category.parent_key) is None
        ):
            raise InvalidParentError(
                f"Parent category {category.parent_key} does not exist",
                key=category.key,
            )

        self.repository.persist(category)
        return category

    def update(self, category: Category) -> Category:
        """Update an existing category.

        Name, description and parent are written. When the parent changes the
        category moves, with its whole subtree, under the new parent (or
        becomes a root when parent_key is None).

        Args:
            category: Category carrying the new field values.

        Returns:
            The updated category.

        Raises:
            NotFoundError: If the category is not stored.
            ValueError: If the name is blank.
            InvalidParentError: If the new parent does not exist or is the
                category itself or one of its descendants.
            OptimisticLockError: If the record changed since it was read.
        """
        logger.debug(f"Updating category {category.key} ({category.name!r})")
        if self.repository.find_by_key(category.key) is None:
            logger.debug(f"Cannot update category {category.key}: not found")
            raise NotFoundError(
                f"Could not find category {category.key} to update", key=category.key
            )
        _check_name(category)
        self._check_new_parent(category)

        return self.repository.merge(category)

    def move(self, key: str, new_parent_key: Optional[str]) -> Category:
        """Attach a category to a new parent, or make it a root.

        Raises:
            NotFoundError: If key does not identify a stored category.
            InvalidParentError: If the move would break the hierarchy.
        """
        category = self.get_by_key(key)
        return self.update(replace(category, parent_key=new_parent_key))

    def delete(self, category: Category) -> None:
        """Delete a category, handing its children to its parent.

        Children of a deleted root become roots. Deleting a category that is
        not stored does nothing.

        Raises:
            OptimisticLockError: If a record changed since it was read.
        """
        logger.debug(f"Deleting category {category.key}")
        with self.repository.transaction():
            stored = self.repository.find_by_key(category.key)
            if stored is None:
                logger.debug(f"Category {category.key} not found, nothing to delete")
                return
            if stored.version != category.version:
                raise OptimisticLockError(
                    f"Category {category.key} was modified concurrently",
                    key=category.key,
                )

            new_parent_key = stored.parent_key
            children = self.repository.find_by_parent(stored.key)
            for child in children:
                child.parent_key = new_parent_key
                self.repository.merge(child)

            self.repository.remove(stored)

        if children:
            logger.info(
                f"Deleted category {category.key}; moved {len(children)} children "
                f"to {new_parent_key or 'the root level'}"
            )

    def _check_new_parent(self, category: Category) -> None:
        parent_key = category.parent_key
        if parent_key is None:
            return
        if parent_key == category.key:
            raise InvalidParentError(
                f"Category {category.key} cannot be its own parent", key=category.key
            )

        parent = self.repository.find_by_key(parent_key)
        if parent is None:
            raise InvalidParentError(
                f"Parent category {parent_key} does not exist", key=category.key
            )

        # Walk up from the new parent; meeting the category means a cycle
        while parent.parent_key is not None:
            if parent.parent_key == category.key:
                raise InvalidParentError(
                    f"Category {parent_key} is a descendant of {category.key}",
                    key=category.key,
                )
            parent = self.repository.find_by_key(parent.parent_key)
            if parent is None:
                break


def _check_name(category: Category) -> None:
    if not category.name or not category.name.strip():
        raise ValueError("Category name cannot be empty")
