import logging
import re

from enums.text_entity import TextEntity
from exceptions import (
    CartException,
    InvalidQuantityException,
    ProductNotFoundException,
    StockClampedException,
)
from models.product import ProductId
from services.cart import CartService, clamp_to_stock
from utils.localizator import Localizator

logger = logging.getLogger(__name__)

# Leading integer of a typed value, the way browsers parse number inputs ("3 pcs" → 3)
QUANTITY_TEXT_PATTERN = re.compile(r'^\s*([+-]?\d+)')


def parse_quantity_text(raw) -> int | None:
    """
    Parse a typed quantity.

    Examples:
        >>> parse_quantity_text(" 4")
        4
        >>> parse_quantity_text("2.5")
        2
        >>> parse_quantity_text("abc") is None
        True
    """
    if raw is None:
        return None
    match = QUANTITY_TEXT_PATTERN.match(str(raw))
    if match is None:
        return None
    return int(match.group(1))


class EditStagingService:
    """
    Unsaved quantity edits layered over the committed cart.

    The shopper can tap +/- or type a quantity as often as they like; nothing
    is written to storage until the edit is committed.
    """

    def __init__(self, context, cart: CartService):
        self.context = context
        self.cart = cart

    def stage(self, product_id: ProductId, delta: int | None = None, absolute: int | None = None) -> bool:
        """
        Stage a proposed quantity for a cart line.

        The new value is computed from the pending value if one exists, else from
        the committed quantity. Negative results are refused; results above the
        stock bound are clamped and reported.

        Args:
            product_id: Line to edit
            delta: Relative change (+1 / -1 taps)
            absolute: Typed quantity

        Returns:
            True if a proposal was written
        """
        if (delta is None) == (absolute is None):
            raise ValueError("stage() needs exactly one of delta or absolute")

        try:
            proposed, clamped = self._stage(product_id, delta, absolute)
        except CartException as e:
            self.context.notifications.report(e)
            return False

        self.cart._propose(product_id, proposed)
        if clamped is not None:
            self.context.notifications.report(clamped)
        return True

    def _stage(self, product_id: ProductId, delta: int | None,
               absolute: int | None) -> tuple[int, StockClampedException | None]:
        line = self.cart.get_line(product_id)
        product = self.context.catalog.get(product_id)
        if line is None or product is None:
            raise ProductNotFoundException(product_id)

        value = absolute if absolute is not None else delta
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidQuantityException(product_id, value)

        requested = absolute if absolute is not None else line.effective_quantity + delta
        if requested < 0:
            raise InvalidQuantityException(product_id, requested)

        proposed, was_clamped = clamp_to_stock(product, requested)
        logger.debug(f"Staged product {product_id}: {line.effective_quantity} -> {proposed}"
                     f"{' (clamped)' if was_clamped else ''}")
        if was_clamped:
            return proposed, StockClampedException(product_id, requested, proposed)
        return proposed, None

    def set_quantity_text(self, product_id: ProductId, raw) -> bool:
        quantity = parse_quantity_text(raw)
        if quantity is None:
            self.context.notifications.report(InvalidQuantityException(product_id, raw))
            return False
        return self.stage(product_id, absolute=quantity)

    def commit(self, product_id: ProductId) -> bool:
        return self.cart.commit_edit(product_id)

    def discard(self, product_id: ProductId) -> bool:
        if not self.cart._drop_proposal(product_id):
            self.context.notifications.info(TextEntity.CART, "no_changes")
            return False
        self.context.notifications.info(TextEntity.CART, "changes_cancelled")
        return True

    def commit_all(self) -> bool:
        return self.cart.commit_all_edits()

    def discard_all(self) -> bool:
        """Drop every pending edit after confirmation."""
        if not self.cart.has_pending():
            self.context.notifications.info(TextEntity.CART, "no_changes")
            return False
        if not self.context.ask(self._text("confirm_discard_changes")):
            return False

        dropped = self.cart._drop_all_proposals()
        logger.info(f"Discarded {dropped} pending edit(s)")
        self.context.notifications.info(TextEntity.CART, "all_changes_cancelled")
        return True

    def has_pending(self) -> bool:
        return self.cart.has_pending()

    def pending_count(self) -> int:
        return self.cart.pending_count()

    def get_pending(self, product_id: ProductId) -> int | None:
        line = self.cart.get_line(product_id)
        return line.pending_quantity if line else None

    def close_cart(self) -> bool:
        """
        Close the cart view.

        With pending edits the shopper must confirm; accepting discards them.

        Returns:
            True if the cart may close
        """
        if not self.cart.has_pending():
            return True
        if not self.context.ask(self._text("confirm_close_unsaved")):
            return False

        dropped = self.cart._drop_all_proposals()
        logger.info(f"Cart closed, discarded {dropped} pending edit(s)")
        return True

    def _text(self, key: str) -> str:
        return Localizator.get_text(TextEntity.CART, key, lang=self.context.settings.language)
