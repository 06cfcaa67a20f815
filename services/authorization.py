"""Role checks in front of a CategoryStore."""

import functools
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional
from exceptions import AccessDeniedError
from models.category import Category
from logger import get_logger

logger = get_logger()

ROLE_USER = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"


@dataclass(frozen=True)
class Principal:
    """The caller on whose behalf store operations run."""

    name: str
    roles: FrozenSet[str] = field(default_factory=frozenset)

    def has_role(self, role: str) -> bool:
        return role in self.roles


def requires_role(role: str):
    """Decorate a SecuredCategoryStore method so it runs only for `role`."""

    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            if not self.principal.has_role(role):
                logger.warning(
                    f"Access denied: {self.principal.name} lacks {role} "
                    f"for {method.__name__}"
                )
                raise AccessDeniedError(
                    f"{method.__name__} requires {role}"
                )
            return method(self, *args, **kwargs)

        return wrapper

    return decorator


class SecuredCategoryStore:
    """CategoryStore wrapper that checks the principal's roles.

    Reading, inserting and updating require ROLE_USER; deleting requires
    ROLE_ADMIN. The wrapped store's own errors pass through unchanged.

    Args:
        store: The CategoryStore to protect.
        principal: The current caller.
    """

    def __init__(self, store, principal: Principal):
        self.store = store
        self.principal = principal

    @requires_role(ROLE_USER)
    def get_root_categories(self) -> List[Category]:
        return self.store.get_root_categories()

    @requires_role(ROLE_USER)
    def get_children(self, parent_key: str) -> List[Category]:
        return self.store.get_children(parent_key)

    @requires_role(ROLE_USER)
    def get_by_key(self, key: str) -> Category:
        return self.store.get_by_key(key)

    @requires_role(ROLE_USER)
    def find(self, key: str) -> Optional[Category]:
        return self.store.find(key)

    @requires_role(ROLE_USER)
    def insert(self, category: Category) -> Category:
        return self.store.insert(category)

    @requires_role(ROLE_USER)
    def update(self, category: Category) -> Category:
        return self.store.update(category)

    @requires_role(ROLE_USER)
    def move(self, key: str, new_parent_key: Optional[str]) -> Category:
        return self.store.move(key, new_parent_key)

    @requires_role(ROLE_ADMIN)
    def delete(self, category: Category) -> None:
        self.store.delete(category)
