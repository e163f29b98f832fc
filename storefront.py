"""
Storefront wiring.

Builds the cart, staging, debounced quantity input and checkout services over
one CartContext. Hosts keep the returned Storefront and forward UI events to it.

Usage:
    storefront = build_storefront(
        products=[{"id": 1, "title": "Green Tea", "price": 100, "stock": 3}],
        notify=show_toast,
        confirm=ask_user,
        open_link=open_in_browser,
    )
    storefront.cart.add_line(1)
"""

import asyncio
import logging
from dataclasses import dataclass

from context import CartContext, build_context
from models.settings import StoreSettings
from services.cart import CartService
from services.checkout import CheckoutService
from services.quantity_input import QuantityInputDebouncer
from services.staging import EditStagingService
from utils.config_validator import validate_or_exit
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


@dataclass
class Storefront:
    context: CartContext
    cart: CartService
    staging: EditStagingService
    quantity_input: QuantityInputDebouncer
    checkout: CheckoutService

    def close_cart(self) -> bool:
        """
        Close the cart view.

        Scheduled quantity input is staged first so the close confirmation sees it.

        Returns:
            True if the cart may close
        """
        self.quantity_input.flush_all()
        return self.staging.close_cart()


def build_storefront(context: CartContext | None = None, loop: asyncio.AbstractEventLoop | None = None,
                     **context_kwargs) -> Storefront:
    """
    Build a storefront over an existing context, or a new one from build_context(**context_kwargs).

    Quantity input is debounced on `loop`, or on the loop running when input arrives.
    """
    context = context or build_context(**context_kwargs)
    cart = CartService(context)
    staging = EditStagingService(context, cart)
    quantity_input = QuantityInputDebouncer(staging, context.settings.quantity_debounce_ms / 1000, loop)
    checkout = CheckoutService(context, cart, staging)
    logger.info(f"Storefront ready: {len(context.catalog)} product(s), {len(cart.get_lines())} cart line(s)")
    return Storefront(
        context=context,
        cart=cart,
        staging=staging,
        quantity_input=quantity_input,
        checkout=checkout
    )


def create_storefront_from_config(products=(), **host_callbacks) -> Storefront:
    """
    Host startup: configure logging, validate the environment-driven settings and build the storefront.

    Exits with a readable message if the store configuration is invalid.
    """
    setup_logging()
    settings = StoreSettings.from_config()
    validate_or_exit(settings)
    return build_storefront(build_context(products=products, settings=settings, **host_callbacks))
