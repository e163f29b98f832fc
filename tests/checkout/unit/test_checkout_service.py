"""
Unit Tests: CheckoutService

Tests for services/checkout.py covering:
- start() guards (empty cart, unsaved edits)
- message order branch (validation, veto, outbound link, completion)
- receipt branch (tax invoice pricing, printing)
- back() / close() and the cart clear policy
"""

from unittest.mock import Mock
from urllib.parse import unquote

import pytest

from enums.cart_clear_policy import CartClearPolicy
from enums.checkout_mode import CheckoutMode
from enums.delivery_option import DeliveryOption
from enums.order_id_format import OrderIdFormat
from models.checkout import CustomerDTO
from models.settings import StoreSettings

CUSTOMER = {"name": "Asha Rao", "phone": "9876543210", "address": "12 MG Road, Pune"}


@pytest.fixture
def storefront(make_storefront):
    storefront = make_storefront(open_link=Mock(), on_checkout_complete=Mock(), print_receipt=Mock())
    storefront.cart.add_line("P3", 2)  # 1200
    return storefront


def open_message_form(storefront):
    assert storefront.checkout.start() is True
    assert storefront.checkout.select_message_order() is True


class TestStartGuards:

    def test_start_with_empty_cart(self, make_storefront, notify):
        storefront = make_storefront()

        assert storefront.checkout.start() is False

        assert storefront.checkout.mode == CheckoutMode.IDLE
        assert notify.calls == [("error", "Your cart is empty!")]

    def test_start_with_unsaved_edits(self, storefront, notify):
        storefront.staging.stage("P3", delta=1)
        notify.clear()

        assert storefront.checkout.start() is False

        assert storefront.checkout.mode == CheckoutMode.IDLE
        assert notify.calls == [("warning", "Please save or cancel your changes before checkout")]

    def test_start_opens_method_selection(self, storefront):
        assert storefront.checkout.start() is True
        assert storefront.checkout.mode == CheckoutMode.METHOD_SELECT

    def test_start_twice_is_refused(self, storefront, notify):
        storefront.checkout.start()
        notify.clear()

        assert storefront.checkout.start() is False
        assert notify.calls == [("warning", "This action is not available right now")]


class TestMessageOrder:

    def test_missing_fields_keep_form_open(self, storefront, notify):
        open_message_form(storefront)
        notify.clear()

        payload = storefront.checkout.submit_message_order({"name": "Asha", "phone": "  ", "address": ""})

        assert payload is None
        assert storefront.checkout.mode == CheckoutMode.MESSAGE_FORM
        assert storefront.checkout.session.customer.name == "Asha"
        assert notify.calls == [("warning", "Please fill in all required fields: Mobile, Address")]
        storefront.context.open_link.assert_not_called()

    def test_none_field_reported_as_missing(self, storefront, notify):
        open_message_form(storefront)
        notify.clear()

        payload = storefront.checkout.submit_message_order({**CUSTOMER, "phone": None})

        assert payload is None
        assert storefront.checkout.mode == CheckoutMode.MESSAGE_FORM
        assert notify.calls == [("warning", "Please fill in all required fields: Mobile")]

    def test_numeric_phone_accepted(self, storefront):
        open_message_form(storefront)

        payload = storefront.checkout.submit_message_order({**CUSTOMER, "phone": 9876543210})

        assert payload is not None
        assert payload.customer.phone == "9876543210"

    def test_unknown_delivery_option_reported(self, storefront, notify):
        open_message_form(storefront)
        notify.clear()

        assert storefront.checkout.preview_message({**CUSTOMER, "delivery_option": "drone"}) is None
        assert storefront.checkout.submit_message_order({**CUSTOMER, "delivery_option": "drone"}) is None
        assert [severity for severity, _ in notify.calls] == ["warning", "warning"]
        assert storefront.checkout.mode == CheckoutMode.MESSAGE_FORM

    def test_optional_phone_validation(self, make_storefront, notify):
        storefront = make_storefront(settings=StoreSettings(validate_phone=True), open_link=Mock())
        storefront.cart.add_line("P1")
        open_message_form(storefront)
        notify.clear()

        payload = storefront.checkout.submit_message_order({**CUSTOMER, "phone": "12345"})

        assert payload is None
        assert notify.calls == [("warning", "Mobile number must be 10 digits")]

    def test_minimum_order_amount(self, make_storefront, notify):
        storefront = make_storefront(settings=StoreSettings(min_order_amount=500))
        storefront.cart.add_line("P1")
        open_message_form(storefront)
        notify.clear()

        assert storefront.checkout.submit_message_order(CUSTOMER) is None
        assert notify.calls == [("warning", "Minimum order amount is ₹500.00")]

    def test_submit_sends_order(self, storefront, notify):
        open_message_form(storefront)
        notify.clear()

        payload = storefront.checkout.submit_message_order(CUSTOMER)

        assert payload is not None
        assert payload.order_id.startswith("ORD")
        assert payload.pricing.subtotal == 1200.0
        assert payload.pricing.tax == 0.0
        assert payload.pricing.total == 1200.0
        assert payload.link.startswith("https://wa.me/919134567890?text=")
        assert unquote(payload.link.split("?text=", 1)[1]) == payload.message
        storefront.context.open_link.assert_called_once_with(payload.link)
        storefront.context.on_checkout_complete.assert_called_once_with("message", payload)
        assert notify.calls == [("success", "Order sent successfully! 🎉")]
        assert storefront.checkout.mode == CheckoutMode.IDLE
        assert storefront.checkout.session is None

    def test_message_tax_when_enabled(self, make_storefront):
        storefront = make_storefront(settings=StoreSettings(show_tax_in_message=True))
        storefront.cart.add_line("P3", 2)
        open_message_form(storefront)

        payload = storefront.checkout.submit_message_order(CUSTOMER)

        assert payload.pricing.tax == 216.0
        assert payload.pricing.total == 1416.0
        assert "GST (18%): ₹216.00" in payload.message

    def test_cart_kept_by_default(self, storefront):
        open_message_form(storefront)

        storefront.checkout.submit_message_order(CUSTOMER)

        assert storefront.cart.get_line("P3").quantity == 2

    def test_cart_cleared_by_policy(self, make_storefront):
        storefront = make_storefront(settings=StoreSettings(cart_clear_policy=CartClearPolicy.AFTER_MESSAGE))
        storefront.cart.add_line("P3")
        open_message_form(storefront)

        storefront.checkout.submit_message_order(CUSTOMER)

        assert storefront.cart.is_empty()

    def test_before_send_veto(self, make_storefront, notify):
        storefront = make_storefront(open_link=Mock(), on_before_send=Mock(return_value=False))
        storefront.cart.add_line("P3")
        open_message_form(storefront)
        notify.clear()

        assert storefront.checkout.submit_message_order(CUSTOMER) is None

        storefront.context.open_link.assert_not_called()
        assert storefront.checkout.mode == CheckoutMode.MESSAGE_FORM
        assert notify.calls == [("info", "Order was not sent")]

    def test_preview_keeps_order_id(self, storefront):
        open_message_form(storefront)

        preview = storefront.checkout.preview_message(CUSTOMER)
        payload = storefront.checkout.submit_message_order(CUSTOMER)

        assert preview == payload.message
        assert f"Order ID: {payload.order_id}" in preview

    def test_submit_outside_form_is_refused(self, storefront, notify):
        storefront.checkout.start()
        notify.clear()

        assert storefront.checkout.submit_message_order(CUSTOMER) is None
        assert notify.of("warning") == ["This action is not available right now"]


class TestReceipt:

    def test_receipt_includes_tax(self, storefront, notify):
        """Subtotal 1200, home delivery: delivery 0, tax 216, total 1416"""
        storefront.checkout.start()
        notify.clear()

        receipt = storefront.checkout.select_receipt(DeliveryOption.HOME)

        assert receipt.pricing.delivery_charge == 0.0
        assert receipt.pricing.tax == 216.0
        assert receipt.pricing.total == 1416.0
        assert storefront.checkout.mode == CheckoutMode.RECEIPT_VIEW
        assert "Tax (18% GST):" in receipt.text
        assert "₹1416.00" in receipt.html
        storefront.context.on_checkout_complete.assert_called_once_with("receipt", receipt)
        assert notify.calls == [("success", f"Receipt {receipt.order_id} is ready")]

    def test_receipt_does_not_mutate_cart(self, storefront):
        storefront.checkout.start()
        storefront.checkout.select_receipt()

        assert storefront.cart.get_line("P3").quantity == 2

    def test_receipt_cleared_by_policy(self, make_storefront):
        storefront = make_storefront(settings=StoreSettings(cart_clear_policy=CartClearPolicy.ALWAYS))
        storefront.cart.add_line("P3")
        storefront.checkout.start()

        receipt = storefront.checkout.select_receipt()

        assert receipt.pricing.subtotal == 600.0
        assert storefront.cart.is_empty()

    def test_print_receipt(self, storefront):
        storefront.checkout.start()
        receipt = storefront.checkout.select_receipt()

        assert storefront.checkout.print_receipt() is True
        storefront.context.print_receipt.assert_called_once_with(receipt.html)

    def test_print_outside_receipt_view(self, storefront, notify):
        storefront.checkout.start()
        notify.clear()

        assert storefront.checkout.print_receipt() is False
        storefront.context.print_receipt.assert_not_called()
        assert notify.of("warning") == ["This action is not available right now"]

    def test_sequence_order_ids(self, make_storefront):
        settings = StoreSettings(order_id_format=OrderIdFormat.SEQUENCE, order_prefix="TEA")
        storefront = make_storefront(settings=settings)
        storefront.cart.add_line("P1")

        storefront.checkout.start()
        first = storefront.checkout.select_receipt()
        storefront.checkout.back()
        second = storefront.checkout.select_receipt()

        assert first.order_id == "TEA-001-20261018"
        assert second.order_id == "TEA-002-20261018"


class TestNavigation:

    def test_back_discards_session_data(self, storefront):
        open_message_form(storefront)
        storefront.checkout.preview_message(CUSTOMER)
        assert storefront.checkout.session.order_id is not None

        assert storefront.checkout.back() is True

        assert storefront.checkout.mode == CheckoutMode.METHOD_SELECT
        assert storefront.checkout.session.customer is None
        assert storefront.checkout.session.order_id is None

    def test_back_from_method_select_refused(self, storefront, notify):
        storefront.checkout.start()
        notify.clear()

        assert storefront.checkout.back() is False
        assert storefront.checkout.mode == CheckoutMode.METHOD_SELECT

    def test_close_never_touches_cart(self, storefront):
        storefront.checkout.start()
        storefront.checkout.select_receipt()

        storefront.checkout.close()

        assert storefront.checkout.mode == CheckoutMode.IDLE
        assert storefront.cart.get_line("P3").quantity == 2

    def test_customer_dto_accepted(self, storefront):
        open_message_form(storefront)

        payload = storefront.checkout.submit_message_order(
            CustomerDTO(name=" Asha ", phone="9876543210", address="Pune", delivery_option=DeliveryOption.PICKUP)
        )

        assert payload.customer.name == "Asha"
        assert payload.pricing.delivery_charge == 0.0
        assert "Type: Store Pickup" in payload.message
