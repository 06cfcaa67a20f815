"""Error kinds raised by the category store and its collaborators."""

from typing import Optional


class CanopyError(Exception):
    """Base exception for category store errors."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class NotFoundError(CanopyError):
    """Raised when an operation references a key absent from the store."""


class DuplicateKeyError(CanopyError):
    """Raised when inserting a category whose key is already stored."""


class InvalidParentError(CanopyError):
    """Raised when a parent key does not resolve or would create a cycle."""


class OptimisticLockError(CanopyError):
    """Raised when a record was modified by someone else since it was read."""


class DataIntegrityError(CanopyError):
    """Raised when the storage backend rejects a write."""


class AccessDeniedError(CanopyError):
    """Raised when the caller lacks the role an operation requires."""
