"""Category persistence backends."""

from typing import List
from config import Config
from persistence.base import CategoryRepository
from persistence.memory import MemoryCategoryRepository
from persistence.sqlite import SqliteCategoryRepository
from logger import get_logger

logger = get_logger()

_BACKENDS = ("memory", "sqlite")


def get_repository(config: Config, db_manager=None) -> CategoryRepository:
    """Create the repository named by config.store_backend.

    Args:
        config: Application configuration.
        db_manager: Database manager, required by the sqlite backend.

    Returns:
        CategoryRepository instance.

    Raises:
        ValueError: If the backend is unknown or its requirements are missing.
    """
    backend = config.store_backend

    if backend == "memory":
        logger.debug("Using in-memory category storage")
        return MemoryCategoryRepository()

    elif backend == "sqlite":
        if db_manager is None:
            raise ValueError("sqlite store backend requires a database manager")
        logger.debug(f"Using SQLite category storage at {db_manager.get_db_path()}")
        return SqliteCategoryRepository(db_manager)

    else:
        raise ValueError(f"Unknown store backend: {backend}")


def get_available_backends() -> List[str]:
    """Get list of available store backends."""
    return list(_BACKENDS)


__all__ = [
    "CategoryRepository",
    "MemoryCategoryRepository",
    "SqliteCategoryRepository",
    "get_available_backends",
    "get_repository",
]
