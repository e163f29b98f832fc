import logging
from typing import Iterable

from enums.text_entity import TextEntity
from exceptions import (
    CartException,
    InvalidQuantityException,
    OutOfStockException,
    PersistenceWriteFailedException,
    ProductNotFoundException,
    StockClampedException,
)
from models.cart_line import CartLine, Committed
from models.cart_view import CartViewDTO, CartViewLineDTO
from models.product import ProductDTO, ProductId
from services.pricing import PricingService
from utils.localizator import Localizator

logger = logging.getLogger(__name__)


def clamp_to_stock(product: ProductDTO | None, requested: int) -> tuple[int, bool]:
    """
    Clamp a requested quantity to the product's stock bound.

    Returns:
        tuple: (quantity, was_clamped)
    """
    if product is None or not product.is_stock_bounded or requested <= product.stock:
        return requested, False
    return max(product.stock, 0), True


class CartService:
    """
    Owns the committed cart of one context.

    Lines are kept in insertion order, keyed by product id. Every committed
    mutation writes the full cart back to storage and calls the host render
    callback; pending edits only change the display projection.
    """

    def __init__(self, context):
        self.context = context
        self._lines: dict[ProductId, CartLine] = {
            line.product_id: line for line in context.repository.load()
        }

    # Reads (committed quantities only)

    def get_lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def get_line(self, product_id: ProductId) -> CartLine | None:
        return self._lines.get(product_id)

    def get_total(self) -> float:
        return PricingService.calculate_subtotal(self._lines.values())

    def get_line_count(self) -> int:
        """Number of items in the cart (sum of committed quantities), shown on the cart badge."""
        return sum(line.quantity for line in self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def has_pending(self) -> bool:
        return any(line.has_pending_edit for line in self._lines.values())

    def pending_count(self) -> int:
        return sum(1 for line in self._lines.values() if line.has_pending_edit)

    def get_view(self) -> CartViewDTO:
        """Display projection: committed state with pending edits overlaid."""
        view_lines = []
        for line in self._lines.values():
            display_quantity = line.effective_quantity
            view_lines.append(CartViewLineDTO(
                product_id=line.product_id,
                title=line.title,
                unit_price=line.unit_price,
                image=line.image,
                category=line.category,
                committed_quantity=line.quantity,
                display_quantity=display_quantity,
                is_pending=line.has_pending_edit,
                line_total=line.line_total,
                display_line_total=round(line.unit_price * display_quantity, 2)
            ))

        return CartViewDTO(
            lines=view_lines,
            total=self.get_total(),
            projected_total=round(sum(line.display_line_total for line in view_lines), 2),
            item_count=self.get_line_count(),
            pending_count=self.pending_count()
        )

    # Committed mutations

    def add_line(self, product_id: ProductId, quantity: int = 1) -> bool:
        """
        Add a product to the cart, or increase the quantity of its existing line.

        The quantity is clamped to the product's stock. A clamp is reported as a
        single warning instead of the success notification.

        Returns:
            True if the committed cart changed
        """
        try:
            line, clamped = self._add_line(product_id, quantity)
        except CartException as e:
            self.context.notifications.report(e)
            return False

        if line is None:
            self.context.notifications.report(clamped)
            return False

        self._after_commit()
        if clamped is not None:
            self.context.notifications.report(clamped)
        else:
            self.context.notifications.success(TextEntity.CART, "item_added", title=line.title)
        return True

    def _add_line(self, product_id: ProductId,
                  quantity: int) -> tuple[CartLine | None, StockClampedException | None]:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidQuantityException(product_id, quantity)

        product = self.context.catalog.get(product_id)
        if product is None:
            raise ProductNotFoundException(product_id)
        if product.is_stock_bounded and product.stock <= 0:
            raise OutOfStockException(product_id, product.title)

        existing = self._lines.get(product_id)
        current = existing.quantity if existing else 0
        requested = current + quantity
        new_quantity, was_clamped = clamp_to_stock(product, requested)
        clamped = StockClampedException(product_id, requested, new_quantity) if was_clamped else None

        if new_quantity <= current:
            # Already at the stock bound, nothing to add
            logger.info(f"Add of product {product_id} refused: line already holds {current} of {product.stock}")
            return None, clamped

        if existing is None:
            line = CartLine(
                product_id=product.id,
                title=product.title,
                unit_price=product.price,
                image=product.image,
                category=product.category,
                state=Committed(quantity=new_quantity)
            )
        elif existing.has_pending_edit:
            line = existing.model_copy(update={
                "state": existing.state.model_copy(update={"quantity": new_quantity})
            })
        else:
            line = existing.with_committed(new_quantity)

        self._lines[product_id] = line
        logger.info(f"Cart line {product_id}: {current} -> {new_quantity}"
                    f"{' (clamped)' if clamped else ''}")
        return line, clamped

    def remove_line(self, product_id: ProductId) -> bool:
        """Delete a line together with any pending edit on it."""
        if self._lines.pop(product_id, None) is None:
            self.context.notifications.report(ProductNotFoundException(product_id))
            return False

        logger.info(f"Cart line {product_id} removed")
        self._after_commit()
        self.context.notifications.info(TextEntity.CART, "item_removed")
        return True

    def commit_edit(self, product_id: ProductId) -> bool:
        """
        Commit the pending quantity of one line.

        A pending quantity of 0 removes the line, but only after the shopper
        confirms. Declining drops the pending value and leaves the line as it was.

        Returns:
            True if the committed cart changed
        """
        line = self._lines.get(product_id)
        if line is None:
            self.context.notifications.report(ProductNotFoundException(product_id))
            return False
        if not line.has_pending_edit:
            self.context.notifications.info(TextEntity.CART, "no_changes")
            return False

        proposed, clamped = clamp_to_stock(self.context.catalog.get(product_id), line.pending_quantity)
        if clamped:
            self.context.notifications.report(
                StockClampedException(product_id, line.pending_quantity, proposed)
            )

        if proposed == 0:
            if not self.context.ask(self._text("confirm_remove_item")):
                self._drop_proposal(product_id)
                return False
            del self._lines[product_id]
            logger.info(f"Cart line {product_id} removed by zero-quantity commit")
            self._after_commit()
            self.context.notifications.info(TextEntity.CART, "item_removed")
            return True

        self._lines[product_id] = line.with_committed(proposed)
        logger.info(f"Cart line {product_id}: committed {line.quantity} -> {proposed}")
        self._after_commit()
        if not clamped:
            self.context.notifications.success(TextEntity.CART, "quantity_updated")
        return True

    def commit_all_edits(self) -> bool:
        """
        Commit every pending edit at once.

        Lines proposed for removal share one confirmation. Declined removals
        are dropped; the other edits are still committed.
        """
        pending_lines = [line for line in self._lines.values() if line.has_pending_edit]
        if not pending_lines:
            self.context.notifications.info(TextEntity.CART, "no_changes")
            return False

        # Removals include edits clamped to 0 by a stock drop since staging
        clamped_lines = []
        for line in pending_lines:
            proposed, clamped = clamp_to_stock(self.context.catalog.get(line.product_id), line.pending_quantity)
            if clamped:
                self.context.notifications.report(
                    StockClampedException(line.product_id, line.pending_quantity, proposed)
                )
            clamped_lines.append((line, proposed))

        removals = [line for line, proposed in clamped_lines if proposed == 0]
        remove_confirmed = False
        if removals:
            remove_confirmed = self.context.ask(self._text("confirm_remove_items").format(count=len(removals)))

        for line, proposed in clamped_lines:
            if proposed > 0:
                self._lines[line.product_id] = line.with_committed(proposed)
            elif remove_confirmed:
                del self._lines[line.product_id]
            else:
                self._lines[line.product_id] = line.without_proposal()

        logger.info(f"Committed {len(pending_lines)} pending edit(s), "
                    f"{len(removals) if remove_confirmed else 0} removal(s)")
        self._after_commit()
        self.context.notifications.success(TextEntity.CART, "all_changes_saved")
        return True

    def clear(self) -> bool:
        """Empty the cart and every pending edit after confirmation."""
        if not self._lines:
            self.context.notifications.info(TextEntity.CART, "cart_already_empty")
            return False
        if not self.context.ask(self._text("confirm_clear_cart")):
            return False

        self._lines.clear()
        logger.info("Cart cleared")
        self._after_commit()
        self.context.notifications.info(TextEntity.CART, "cart_cleared")
        return True

    def clear_after_checkout(self) -> None:
        """Empty the cart without confirmation (store clear policy after a completed order)."""
        self._lines.clear()
        logger.info("Cart cleared after completed checkout")
        self._after_commit()

    def set_products(self, products: Iterable[ProductDTO | dict]) -> None:
        """
        Replace the catalog and refresh title, image and category of cart lines.

        The unit price stays the one captured when the line was added.
        """
        self.context.catalog.set_products(products)
        changed = False
        for product_id, line in list(self._lines.items()):
            product = self.context.catalog.get(product_id)
            if product is None:
                continue
            refreshed = {"title": product.title, "image": product.image, "category": product.category}
            if any(getattr(line, name) != value for name, value in refreshed.items()):
                self._lines[product_id] = line.model_copy(update=refreshed)
                changed = True

        if changed:
            self._after_commit()

    # Display-only mutations used by the staging layer

    def _propose(self, product_id: ProductId, proposed_quantity: int) -> None:
        line = self._lines[product_id]
        if proposed_quantity == line.quantity:
            self._lines[product_id] = line.without_proposal()
        else:
            self._lines[product_id] = line.with_proposal(proposed_quantity)
        self._after_display_change()

    def _drop_proposal(self, product_id: ProductId) -> bool:
        line = self._lines.get(product_id)
        if line is None or not line.has_pending_edit:
            return False
        self._lines[product_id] = line.without_proposal()
        self._after_display_change()
        return True

    def _drop_all_proposals(self) -> int:
        dropped = 0
        for product_id, line in list(self._lines.items()):
            if line.has_pending_edit:
                self._lines[product_id] = line.without_proposal()
                dropped += 1
        if dropped:
            self._after_display_change()
        return dropped

    # Side effects

    def _after_commit(self) -> None:
        lines = self.get_lines()
        try:
            self.context.repository.save(lines)
        except PersistenceWriteFailedException as e:
            logger.error(f"Cart persistence failed, keeping in-memory state: {e}")
            self.context.notifications.report(e)

        self.context.call_host(self.context.on_cart_update, lines, self.get_total(), self.get_line_count())
        self._after_display_change()

    def _after_display_change(self) -> None:
        self.context.call_host(self.context.on_display_update, self.get_view())
        self.context.call_host(self.context.on_unsaved_changes, self.has_pending(), self.pending_count())

    def _text(self, key: str) -> str:
        return Localizator.get_text(TextEntity.CART, key, lang=self.context.settings.language)
