"""SQLite-backed category storage."""

import sqlite3
from contextlib import contextmanager
from typing import List, Optional
from exceptions import DataIntegrityError, NotFoundError, OptimisticLockError
from models.category import Category
from models.entity import EntityRef
from persistence.base import CategoryRepository

_CATEGORY_SELECT_FIELDS = "category_key, name, description, parent_key, version"


def _row_to_category(row) -> Category:
    return Category(
        name=row[1],
        description=row[2],
        parent_key=row[3],
        entity=EntityRef(key=row[0], version=row[4]),
    )


class SqliteCategoryRepository(CategoryRepository):
    """Repository storing categories in the `categories` table.

    Each call opens its own connection through the database manager unless it
    runs inside transaction(), in which case all calls share one connection
    that is committed when the block exits cleanly and rolled back otherwise.

    Args:
        db_manager: Database manager instance for database operations.
    """

    def __init__(self, db_manager):
        self.db_manager = db_manager
        self._conn: Optional[sqlite3.Connection] = None

    @contextmanager
    def _connection(self):
        if self._conn is not None:
            try:
                yield self._conn
            except sqlite3.IntegrityError as e:
                raise DataIntegrityError(str(e)) from e
            return

        with self.db_manager.connect() as conn:
            try:
                yield conn
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                raise DataIntegrityError(str(e)) from e
            except Exception:
                conn.rollback()
                raise

    @contextmanager
    def transaction(self):
        if self._conn is not None:
            # Nested blocks join the enclosing transaction
            yield self
            return

        with self.db_manager.connect() as conn:
            self._conn = conn
            try:
                yield self
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                self._conn = None

    def find_by_key(self, key: str) -> Optional[Category]:
        with self._connection() as conn:
            row = conn.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories WHERE category_key = ?",
                (key,),
            ).fetchone()
            return _row_to_category(row) if row else None

    def find_by_parent(self, parent_key: str) -> List[Category]:
        with self._connection() as conn:
            rows = conn.execute(
                f"""
                SELECT {_CATEGORY_SELECT_FIELDS} FROM categories
                WHERE parent_key = ? ORDER BY name, rowid
                """,
                (parent_key,),
            ).fetchall()
            return [_row_to_category(row) for row in rows]

    def find_roots(self) -> List[Category]:
        with self._connection() as conn:
            rows = conn.execute(
                f"""
                SELECT {_CATEGORY_SELECT_FIELDS} FROM categories
                WHERE parent_key IS NULL ORDER BY name, rowid
                """
            ).fetchall()
            return [_row_to_category(row) for row in rows]

    def persist(self, category: Category) -> None:
        with self._connection() as conn:
            conn.execute(
                f"INSERT INTO categories ({_CATEGORY_SELECT_FIELDS}) VALUES (?, ?, ?, ?, ?)",
                (
                    category.key,
                    category.name,
                    category.description,
                    category.parent_key,
                    category.version,
                ),
            )

    def merge(self, category: Category) -> Category:
        with self._connection() as conn:
            cursor = conn.execute(
                """
                UPDATE categories
                SET name = ?, description = ?, parent_key = ?, version = version + 1
                WHERE category_key = ? AND version = ?
                """,
                (
                    category.name,
                    category.description,
                    category.parent_key,
                    category.key,
                    category.version,
                ),
            )
            if cursor.rowcount == 0:
                exists = conn.execute(
                    "SELECT 1 FROM categories WHERE category_key = ?", (category.key,)
                ).fetchone()
                if exists:
                    raise OptimisticLockError(
                        f"Category {category.key} was modified concurrently",
                        key=category.key,
                    )
                raise NotFoundError(
                    f"Category {category.key} not found", key=category.key
                )

        category.entity = category.entity.next_version()
        return category

    def remove(self, category: Category) -> None:
        with self._connection() as conn:
            conn.execute(
                "DELETE FROM categories WHERE category_key = ?", (category.key,)
            )
