import asyncio
import logging
from typing import Callable, Optional

from models.product import ProductId
from services.staging import EditStagingService

logger = logging.getLogger(__name__)


class QuantityInputDebouncer:
    """
    Debounces quantity input events before they reach the staging layer.

    One timer per product id. A new event for the same product cancels the
    previous timer, so only the latest value is staged (last write wins).
    Blur applies the latest value immediately. Without a running event loop
    (synchronous hosts) input is staged right away.
    """

    def __init__(self, staging: EditStagingService, delay_seconds: float,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.staging = staging
        self.delay_seconds = delay_seconds
        self._loop = loop
        self._timers: dict[ProductId, asyncio.TimerHandle] = {}
        self._actions: dict[ProductId, Callable[[], bool]] = {}

    def on_input(self, product_id: ProductId, raw_value) -> None:
        """Typed value in the quantity field."""
        self._schedule(product_id, lambda: self.staging.set_quantity_text(product_id, raw_value))

    def on_step(self, product_id: ProductId, delta: int) -> None:
        """+/- tap."""
        self._schedule(product_id, lambda: self.staging.stage(product_id, delta=delta))

    def on_blur(self, product_id: ProductId, raw_value=None) -> bool:
        """
        Field lost focus: cancel the timer and stage right away.

        Args:
            product_id: Line being edited
            raw_value: Final field value; None applies the last scheduled event

        Returns:
            True if a proposal was written
        """
        self._cancel_timer(product_id)
        action = self._actions.pop(product_id, None)
        if raw_value is not None:
            return self.staging.set_quantity_text(product_id, raw_value)
        if action is None:
            return False
        return action()

    def flush_all(self) -> None:
        """Apply every scheduled event now (e.g. before the cart closes)."""
        for product_id in list(self._actions):
            self.on_blur(product_id)

    def cancel_all(self) -> None:
        """Drop every scheduled event without staging it."""
        for timer in self._timers.values():
            timer.cancel()
        if self._timers:
            logger.debug(f"Cancelled {len(self._timers)} scheduled quantity input(s)")
        self._timers.clear()
        self._actions.clear()

    def has_scheduled(self, product_id: ProductId | None = None) -> bool:
        if product_id is None:
            return bool(self._actions)
        return product_id in self._actions

    def _schedule(self, product_id: ProductId, action: Callable[[], bool]) -> None:
        self._cancel_timer(product_id)
        loop = None
        if self.delay_seconds > 0:
            loop = self._loop or self._running_loop()
            if loop is None:
                logger.debug(f"No running event loop, applying quantity input for product {product_id} immediately")
        if loop is None:
            self._actions.pop(product_id, None)
            action()
            return

        self._actions[product_id] = action
        self._timers[product_id] = loop.call_later(self.delay_seconds, self._fire, product_id)

    @staticmethod
    def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _fire(self, product_id: ProductId) -> None:
        self._timers.pop(product_id, None)
        action = self._actions.pop(product_id, None)
        if action is None:
            return
        try:
            action()
        except Exception as e:
            logger.error(f"Debounced quantity update for product {product_id} failed: {e}", exc_info=True)

    def _cancel_timer(self, product_id: ProductId) -> None:
        timer = self._timers.pop(product_id, None)
        if timer is not None:
            timer.cancel()
