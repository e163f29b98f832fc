"""
Unit Tests: QuantityInputDebouncer

Tests for services/quantity_input.py covering:
- on_step() / on_input() - last write wins within the debounce window
- on_blur() - immediate staging
- flush_all() / cancel_all() - cart close handling
"""

import asyncio

import pytest

from models.settings import StoreSettings
from services.quantity_input import QuantityInputDebouncer

DELAY = 0.05


@pytest.fixture
def storefront(make_storefront, confirm_yes):
    storefront = make_storefront(confirm=confirm_yes)
    storefront.cart.add_line("P1")
    storefront.cart.add_line("P3")
    return storefront


@pytest.fixture
def debouncer(storefront):
    return QuantityInputDebouncer(storefront.staging, delay_seconds=DELAY)


class TestDebouncedSteps:

    @pytest.mark.asyncio
    async def test_rapid_steps_settle_to_single_pending_value(self, make_storefront):
        """P1 (price 100, stock 3): two rapid +1 taps leave one pending value of 2, not 3"""
        storefront = make_storefront()
        storefront.cart.add_line("P1")
        debouncer = QuantityInputDebouncer(storefront.staging, delay_seconds=DELAY)
        assert storefront.cart.get_total() == 100.0

        debouncer.on_step("P1", 1)
        debouncer.on_step("P1", 1)

        assert storefront.staging.get_pending("P1") is None
        await asyncio.sleep(DELAY * 3)

        assert storefront.staging.get_pending("P1") == 2
        assert storefront.staging.pending_count() == 1

        assert storefront.staging.commit("P1") is True
        assert storefront.cart.get_line("P1").quantity == 2
        assert storefront.cart.get_total() == 200.0

    @pytest.mark.asyncio
    async def test_typed_input_last_value_wins(self, storefront, debouncer):
        debouncer.on_input("P3", "1")
        debouncer.on_input("P3", "12")
        debouncer.on_input("P3", "4")

        await asyncio.sleep(DELAY * 3)

        assert storefront.staging.get_pending("P3") == 4
        assert not debouncer.has_scheduled()

    @pytest.mark.asyncio
    async def test_products_debounce_independently(self, storefront, debouncer):
        debouncer.on_step("P1", 1)
        debouncer.on_input("P3", "5")

        await asyncio.sleep(DELAY * 3)

        assert storefront.staging.get_pending("P1") == 2
        assert storefront.staging.get_pending("P3") == 5


class TestBlurAndClose:

    @pytest.mark.asyncio
    async def test_blur_applies_immediately(self, storefront, debouncer):
        debouncer.on_input("P3", "6")

        assert debouncer.on_blur("P3") is True

        assert storefront.staging.get_pending("P3") == 6
        assert not debouncer.has_scheduled("P3")

        # The cancelled timer must not stage again
        storefront.staging.discard("P3")
        await asyncio.sleep(DELAY * 3)
        assert storefront.staging.get_pending("P3") is None

    @pytest.mark.asyncio
    async def test_blur_with_final_field_value(self, storefront, debouncer):
        debouncer.on_input("P3", "6")

        debouncer.on_blur("P3", "2")

        assert storefront.staging.get_pending("P3") == 2

    @pytest.mark.asyncio
    async def test_cancel_all_drops_scheduled_input(self, storefront, debouncer):
        debouncer.on_step("P1", 1)

        debouncer.cancel_all()
        await asyncio.sleep(DELAY * 3)

        assert storefront.staging.get_pending("P1") is None

    @pytest.mark.asyncio
    async def test_close_cart_flushes_scheduled_input(self, storefront, confirm_yes):
        """Closing with a scheduled edit stages it first, so the close needs confirmation"""
        storefront.quantity_input = QuantityInputDebouncer(storefront.staging, delay_seconds=DELAY)
        storefront.quantity_input.on_step("P1", 1)

        assert storefront.close_cart() is True

        confirm_yes.assert_called_once_with("You have unsaved changes. Close anyway?")
        assert not storefront.staging.has_pending()
        assert not storefront.quantity_input.has_scheduled()


class TestWithoutDelay:

    def test_zero_delay_stages_synchronously(self, storefront):
        debouncer = QuantityInputDebouncer(storefront.staging, delay_seconds=0)

        debouncer.on_step("P1", 1)

        assert storefront.staging.get_pending("P1") == 2

    def test_no_running_loop_stages_immediately(self, make_storefront):
        """Synchronous hosts have no event loop; input is staged on the spot instead of failing"""
        storefront = make_storefront(settings=StoreSettings(quantity_debounce_ms=300))
        storefront.cart.add_line("P1")

        storefront.quantity_input.on_step("P1", 1)
        storefront.quantity_input.on_input("P1", "3")

        assert storefront.staging.get_pending("P1") == 3
        assert not storefront.quantity_input.has_scheduled()


class TestLoopWiring:

    @pytest.mark.asyncio
    async def test_build_storefront_uses_given_loop(self, make_storefront):
        storefront = make_storefront(
            settings=StoreSettings(quantity_debounce_ms=50), loop=asyncio.get_running_loop()
        )
        storefront.cart.add_line("P1")

        storefront.quantity_input.on_step("P1", 1)

        assert storefront.quantity_input.has_scheduled("P1")
        await asyncio.sleep(0.15)
        assert storefront.staging.get_pending("P1") == 2
