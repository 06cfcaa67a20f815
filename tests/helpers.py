"""Helper utilities for tests."""

from pathlib import Path
import sqlite3
from cli.migrate import apply_pending_migrations
from models.category import Category


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    apply_pending_migrations(conn, migrations_dir)


def build_tree(store, shape: dict, parent_key=None) -> dict:
    """Insert a nested {name: {child_name: {...}}} mapping into a store.

    Returns:
        Dictionary mapping each name to its inserted Category.
    """
    created = {}
    for name, children in shape.items():
        category = store.insert(Category(name=name, parent_key=parent_key))
        created[name] = category
        created.update(build_tree(store, children or {}, category.key))
    return created
