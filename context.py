"""
Explicit cart context.

Every service receives a CartContext at construction instead of reaching for a
shared global cart. A host builds one context per storefront (tests build one
per test), so several isolated carts can live in the same process.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from enums.storage_backend import StorageBackend
from models.settings import StoreSettings
from repositories.cart import CartRepository
from repositories.kv_store import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore
from services.catalog import ProductCatalog
from services.notification import NotificationService, NotifyCallback

logger = logging.getLogger(__name__)


def decline_confirmation(prompt: str) -> bool:
    """Default confirmation: destructive actions need a host that can ask the shopper."""
    logger.info(f"No confirmation handler configured, declining: {prompt}")
    return False


@dataclass
class CartContext:
    settings: StoreSettings
    catalog: ProductCatalog
    repository: CartRepository
    notifications: NotificationService

    # Host collaborators
    confirm: Callable[[str], bool] = decline_confirmation
    on_cart_update: Optional[Callable[[list, float, int], None]] = None  # (lines, total, item_count)
    on_display_update: Optional[Callable[[Any], None]] = None            # (CartViewDTO)
    on_unsaved_changes: Optional[Callable[[bool, int], None]] = None     # (has_pending, pending_count)
    open_link: Optional[Callable[[str], None]] = None
    print_receipt: Optional[Callable[[str], None]] = None
    on_checkout_complete: Optional[Callable[[str, Any], None]] = None    # (method, payload)
    on_before_send: Optional[Callable[[Any], Optional[bool]]] = None     # return False to veto
    clock: Callable[[], datetime] = field(default=datetime.now)

    def call_host(self, callback: Optional[Callable], *args) -> Any:
        """
        Invoke an optional host callback.

        Host failures are logged and never propagate back into cart state changes.
        """
        if callback is None:
            return None
        try:
            return callback(*args)
        except Exception as e:
            logger.error(f"Host callback {getattr(callback, '__name__', callback)!r} failed: {e}", exc_info=True)
            return None

    def ask(self, prompt: str) -> bool:
        """Ask the shopper to confirm a destructive action. Failures count as declined."""
        try:
            return bool(self.confirm(prompt))
        except Exception as e:
            logger.error(f"Confirmation handler failed, treating as declined: {e}")
            return False


def build_store(backend: StorageBackend | None = None) -> KeyValueStore:
    import config

    backend = backend or config.CART_STORAGE_BACKEND
    if backend == StorageBackend.REDIS:
        logger.info(f"Using Redis cart storage at {config.REDIS_HOST}:{config.REDIS_PORT}")
        return RedisKeyValueStore.from_config()
    return InMemoryKeyValueStore()


def build_context(
    products=(),
    settings: StoreSettings | None = None,
    store: KeyValueStore | None = None,
    notify: Optional[NotifyCallback] = None,
    **host_callbacks
) -> CartContext:
    """
    Build a cart context.

    Args:
        products: Catalog products (dicts or ProductDTO)
        settings: Store settings (default: StoreSettings.from_config())
        store: Key/value store (default: backend chosen by CART_STORAGE_BACKEND)
        notify: Host notification callback notify(severity, message)
        **host_callbacks: confirm, on_cart_update, on_display_update, on_unsaved_changes,
                          open_link, print_receipt, on_checkout_complete, on_before_send, clock

    Returns:
        CartContext ready to hand to the services
    """
    settings = settings or StoreSettings.from_config()
    store = store if store is not None else build_store()
    return CartContext(
        settings=settings,
        catalog=ProductCatalog(products),
        repository=CartRepository(store, settings.cart_storage_key),
        notifications=NotificationService(notify, lang=settings.language),
        **host_callbacks
    )
