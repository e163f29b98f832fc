"""
Persistence-related exceptions.
"""

from .base import ShopCartException


class StorageException(ShopCartException):
    """Base exception for cart storage errors."""
    pass


class PersistenceWriteFailedException(StorageException):
    """Raised when the cart could not be written to the key/value store."""

    def __init__(self, storage_key: str, reason: str):
        super().__init__(
            f"Could not save cart under '{storage_key}': {reason}",
            details={'storage_key': storage_key, 'reason': reason}
        )
        self.storage_key = storage_key
        self.reason = reason
