"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject a test database or an in-memory repository.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, the
                    database path in config is ignored.
        repository: Optional repository for testing. If provided,
                    config.store_backend is ignored.
    """

    def __init__(self, config: Config, db_manager=None, repository=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from persistence import get_repository
        from services.categories import CategoryStore

        if repository is None:
            repository = get_repository(config, self.db_manager)
        self.repository = repository
        self.categories = CategoryStore(self.repository)

    def tree(self):
        """Create a refreshed TreeCache over the category store."""
        from services.tree_cache import TreeCache

        cache = TreeCache(self.categories)
        cache.refresh()
        return cache
