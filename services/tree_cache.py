"""Lazily built, memoized tree view over a category store.

The cache answers the questions a tree widget asks (roots, children, parent,
whether a node has children) and fetches from the store only on a cache miss.
It never sees mutations made through the store on its own: callers refresh it
after changing the store, and listeners are told when that happens.
"""

import time
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple
from exceptions import NotFoundError
from models.category import CATEGORY_FIELDS, Category, get_field
from logger import get_logger

logger = get_logger()


@dataclass(frozen=True)
class ContainerRefreshedEvent:
    """Event passed to listeners after TreeCache.refresh()."""

    container: "TreeCache"


RefreshListener = Callable[[ContainerRefreshedEvent], None]


class _Node:
    """Cached wrapper around one category.

    The parent is held through a weak reference; the cache's node map owns
    every node.
    """

    __slots__ = (
        "category",
        "_parent_ref",
        "_children",
        "_child_keys",
        "created_at",
        "__weakref__",
    )

    def __init__(self, category: Category, parent: Optional["_Node"]):
        self.category = category
        self._parent_ref = weakref.ref(parent) if parent is not None else None
        self._children: Optional[Tuple["_Node", ...]] = None
        self._child_keys: Optional[Tuple[str, ...]] = None
        self.created_at = time.monotonic()

    @property
    def parent(self) -> Optional["_Node"]:
        return self._parent_ref() if self._parent_ref is not None else None

    def children(self, cache: "TreeCache") -> Tuple["_Node", ...]:
        if self._children is None:
            try:
                categories = cache.store.get_children(self.category.key)
            except NotFoundError:
                logger.debug(
                    f"Category {self.category.key} no longer exists; treating it as a leaf"
                )
                categories = []
            self._children = tuple(cache._node_for(c, parent=self) for c in categories)
            self._child_keys = tuple(c.key for c in categories)
        return self._children

    def child_keys(self, cache: "TreeCache") -> Tuple[str, ...]:
        if self._child_keys is None:
            self.children(cache)
        return self._child_keys


class TreeCache:
    """Hierarchical, read-mostly view of a CategoryStore.

    Nodes are fetched on first use and kept until the next refresh(). Lookups
    of keys the store no longer knows return None or False instead of raising,
    so a display loop survives categories deleted behind its back.

    Args:
        store: CategoryStore (or anything with the same read operations).
    """

    def __init__(self, store):
        self.store = store
        self._nodes: Dict[str, _Node] = {}
        self._root_keys: Tuple[str, ...] = ()
        self._listeners: List[RefreshListener] = []

    def refresh(self) -> None:
        """Discard all cached nodes and reload the root keys.

        Children are not loaded until asked for. A failure while reading the
        roots propagates and leaves the previous state in place.
        """
        root_keys = tuple(c.key for c in self.store.get_root_categories())
        self._nodes = {}
        self._root_keys = root_keys
        logger.debug(f"Tree cache refreshed with {len(root_keys)} roots")
        self._fire_refreshed(ContainerRefreshedEvent(self))

    def root_keys(self) -> Tuple[str, ...]:
        return self._root_keys

    def children_of(self, key: str) -> Optional[Tuple[str, ...]]:
        """Get the keys of a category's children, or None for an unknown key."""
        node = self._get_node(key)
        return None if node is None else node.child_keys(self)

    def parent_of(self, key: str) -> Optional[str]:
        """Get the parent key; None for roots and unknown keys."""
        node = self._get_node(key)
        if node is None or node.parent is None:
            return None
        return node.parent.category.key

    def has_children(self, key: str) -> bool:
        """Whether the category currently has at least one child.

        Every category may have children; this reports whether it does.
        """
        node = self._get_node(key)
        return False if node is None else len(node.children(self)) > 0

    def are_children_allowed(self, key: str) -> bool:
        # Leaves are shown without an expand control
        return self.has_children(key)

    def is_root(self, key: str) -> bool:
        return key in self._root_keys

    def contains_key(self, key: str) -> bool:
        return self._get_node(key) is not None

    def get_category(self, key: str) -> Optional[Category]:
        node = self._get_node(key)
        return None if node is None else node.category

    def node_age(self, key: str) -> Optional[float]:
        """Seconds since the node for key was built, or None if not cached."""
        node = self._nodes.get(key)
        return None if node is None else time.monotonic() - node.created_at

    def property_names(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in CATEGORY_FIELDS)

    def property_type(self, name: str) -> Optional[type]:
        spec = get_field(name)
        return None if spec is None else spec.type

    def get_property(self, key: str, name: str) -> Any:
        """Read one property of a cached category.

        Returns None for unknown keys and unknown property names.
        """
        spec = get_field(name)
        category = self.get_category(key)
        if spec is None or category is None:
            return None
        return spec.reader(category)

    def add_listener(self, listener: Optional[RefreshListener]) -> None:
        if listener is None:
            return
        self._listeners.append(listener)

    def remove_listener(self, listener: Optional[RefreshListener]) -> None:
        if listener is None or listener not in self._listeners:
            return
        self._listeners.remove(listener)

    def _fire_refreshed(self, event: ContainerRefreshedEvent) -> None:
        # Listeners may add or remove listeners; dispatch to a snapshot
        for listener in list(self._listeners):
            listener(event)

    def _get_node(self, key: str) -> Optional[_Node]:
        node = self._nodes.get(key)
        if node is not None:
            return node
        try:
            category = self.store.get_by_key(key)
        except NotFoundError:
            return None
        return self._node_for(category)

    def _node_for(self, category: Category, parent: Optional[_Node] = None) -> _Node:
        node = self._nodes.get(category.key)
        if node is not None:
            return node
        if parent is None and category.parent_key is not None:
            parent = self._resolve_chain(category.parent_key)
        node = _Node(category, parent)
        self._nodes[category.key] = node
        return node

    def _resolve_chain(self, key: Optional[str]) -> Optional[_Node]:
        """Build the node for key and any uncached ancestors, top down.

        Returns None if key is no longer stored.
        """
        pending = []
        node = None
        while key is not None:
            node = self._nodes.get(key)
            if node is not None:
                break
            try:
                category = self.store.get_by_key(key)
            except NotFoundError:
                break
            pending.append(category)
            key = category.parent_key

        for category in reversed(pending):
            node = _Node(category, node)
            self._nodes[category.key] = node
        return node
