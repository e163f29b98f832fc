"""
Integration Tests: complete storefront workflows

Shopper journeys across cart, staging, checkout and Redis persistence
(fakeredis), wired the way a host wires them with build_storefront().
"""

import logging
from datetime import datetime
from unittest.mock import Mock

import pytest

import config
from context import build_context
from enums.cart_clear_policy import CartClearPolicy
from enums.checkout_mode import CheckoutMode
from models.settings import StoreSettings
from storefront import build_storefront, create_storefront_from_config

FIXED_NOW = datetime(2026, 10, 18, 10, 30, 0)


@pytest.fixture
def host():
    """Host collaborators recorded with mocks."""
    return {
        "confirm": Mock(return_value=True),
        "open_link": Mock(),
        "print_receipt": Mock(),
        "on_cart_update": Mock(),
        "on_checkout_complete": Mock(),
        "clock": lambda: FIXED_NOW,
    }


def build(products, redis_store, notify, host, **settings):
    context = build_context(
        products=products,
        settings=StoreSettings(quantity_debounce_ms=0, **settings),
        store=redis_store,
        notify=notify,
        **host
    )
    return build_storefront(context)


class TestShopperJourneys:

    def test_browse_edit_and_order_by_message(self, products, redis_store, notify, host):
        storefront = build(products, redis_store, notify, host, cart_clear_policy=CartClearPolicy.AFTER_MESSAGE)

        storefront.cart.add_line("P1")
        storefront.cart.add_line("P3")
        storefront.quantity_input.on_step("P1", 1)
        storefront.quantity_input.on_input("P3", "2")

        # Checkout is refused while edits are unsaved
        assert storefront.checkout.start() is False
        storefront.staging.commit_all()
        assert storefront.checkout.start() is True

        storefront.checkout.select_message_order()
        payload = storefront.checkout.submit_message_order(
            {"name": "Asha Rao", "phone": "9876543210", "address": "12 MG Road, Pune"}
        )

        assert [(line.product_id, line.quantity) for line in payload.lines] == [("P1", 2), ("P3", 2)]
        assert payload.pricing.subtotal == 1400.0
        assert payload.pricing.total == 1400.0
        host["open_link"].assert_called_once_with(payload.link)
        assert storefront.cart.is_empty()
        assert storefront.checkout.mode == CheckoutMode.IDLE

        # The cleared cart is what a reload sees
        reloaded = build(products, redis_store, notify, host)
        assert reloaded.cart.is_empty()

    def test_receipt_and_print(self, products, redis_store, notify, host):
        storefront = build(products, redis_store, notify, host)
        storefront.cart.add_line("P3", 2)

        storefront.checkout.start()
        receipt = storefront.checkout.select_receipt()
        storefront.checkout.print_receipt()
        storefront.checkout.close()

        assert receipt.pricing.total == 1416.0
        host["print_receipt"].assert_called_once_with(receipt.html)
        assert storefront.cart.get_line("P3").quantity == 2

    def test_cart_survives_reload(self, products, redis_store, notify, host):
        storefront = build(products, redis_store, notify, host)
        storefront.cart.add_line("P2", 5)
        storefront.cart.add_line("P1")

        reloaded = build(products, redis_store, notify, host)

        assert [(line.product_id, line.quantity) for line in reloaded.cart.get_lines()] == [("P2", 2), ("P1", 1)]
        assert reloaded.cart.get_total() == 600.0

    def test_isolated_contexts(self, products, store, redis_store, notify, host):
        """Two storefronts on different stores never share cart state"""
        first = build(products, redis_store, notify, host)
        second = build_storefront(build_context(products=products, settings=StoreSettings(), store=store))

        first.cart.add_line("P1")

        assert second.cart.is_empty()


class TestStartup:

    @pytest.fixture
    def restore_root_logging(self):
        root_logger = logging.getLogger()
        handlers, level = root_logger.handlers[:], root_logger.level
        yield
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        for handler in handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(level)

    def test_create_from_config(self, products, tmp_path, monkeypatch, restore_root_logging):
        """Startup writes the log file, validates the defaults and uses the configured storage key"""
        monkeypatch.setattr(config, "LOG_DIR", str(tmp_path))
        monkeypatch.setattr(config, "CART_STORAGE_KEY", "kiosk_cart")

        storefront = create_storefront_from_config(products)
        storefront.cart.add_line("P1")

        assert (tmp_path / "shopcart.log").exists()
        assert storefront.context.settings.cart_storage_key == "kiosk_cart"
        assert storefront.context.repository.store.get("kiosk_cart") is not None

    def test_invalid_config_exits(self, products, tmp_path, monkeypatch, restore_root_logging):
        monkeypatch.setattr(config, "LOG_DIR", str(tmp_path))
        monkeypatch.setattr(config, "BUSINESS_PHONE", "12")
        monkeypatch.setattr(config, "COUNTRY_CODE", "")

        with pytest.raises(SystemExit):
            create_storefront_from_config(products)
