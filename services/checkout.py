import logging

from pydantic import ValidationError

from enums.cart_clear_policy import CheckoutMethod
from enums.checkout_mode import CheckoutMode
from enums.delivery_option import DeliveryOption
from enums.text_entity import TextEntity
from exceptions import (
    EmptyCartException,
    InvalidCheckoutStateException,
    MissingFieldException,
    OrderValidationException,
    ShopCartException,
    UnsavedEditsException,
)
from models.checkout import CheckoutSessionDTO, CustomerDTO, OrderPayloadDTO, ReceiptDTO
from services.cart import CartService
from services.invoice_formatter import InvoiceFormatterService
from services.pricing import PricingService
from services.staging import EditStagingService
from utils.checkout_state_machine import CheckoutStateMachine
from utils.order_id import OrderIdGenerator
from utils.order_validation import validate_order

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Checkout session of one cart context.

    IDLE → METHOD_SELECT → {MESSAGE_FORM | RECEIPT_VIEW} → IDLE

    Checkout never edits the cart. The only exception is the store's
    clear policy, applied once an order is completed.
    """

    def __init__(self, context, cart: CartService, staging: EditStagingService):
        self.context = context
        self.cart = cart
        self.staging = staging
        self.session: CheckoutSessionDTO | None = None
        self.order_ids = OrderIdGenerator(context.settings, context.clock)

    @property
    def mode(self) -> CheckoutMode:
        return self.session.mode if self.session else CheckoutMode.IDLE

    # Navigation

    def start(self) -> bool:
        """
        Open the checkout method selection.

        Refused with an empty cart or with unsaved quantity edits.
        """
        try:
            self._require(CheckoutMode.IDLE)
            self._check_cart_ready()
            self._transition(CheckoutMode.METHOD_SELECT)
        except ShopCartException as e:
            self.context.notifications.report(e)
            return False
        return True

    def select_message_order(self) -> bool:
        try:
            self._require(CheckoutMode.METHOD_SELECT)
            self._transition(CheckoutMode.MESSAGE_FORM)
        except ShopCartException as e:
            self.context.notifications.report(e)
            return False
        return True

    def back(self) -> bool:
        """Return to method selection, dropping the form data, order id and receipt."""
        try:
            if self.mode not in (CheckoutMode.MESSAGE_FORM, CheckoutMode.RECEIPT_VIEW):
                raise InvalidCheckoutStateException(
                    self.mode.value, f"{CheckoutMode.MESSAGE_FORM.value}|{CheckoutMode.RECEIPT_VIEW.value}"
                )
            self._transition(CheckoutMode.METHOD_SELECT)
        except ShopCartException as e:
            self.context.notifications.report(e)
            return False
        return True

    def close(self) -> None:
        """Leave checkout from any mode. The cart is left as it is."""
        if self.mode == CheckoutMode.IDLE:
            return
        self._transition(CheckoutMode.IDLE)

    # Message order branch

    def preview_message(self, customer: CustomerDTO | dict) -> str | None:
        """
        Validate the form and return the order text that would be sent.

        The order id shown in the preview is kept for the submission.
        """
        try:
            self._require(CheckoutMode.MESSAGE_FORM)
            payload = self._build_order_payload(customer)
        except ShopCartException as e:
            self.context.notifications.report(e)
            return None
        return payload.message

    def submit_message_order(self, customer: CustomerDTO | dict) -> OrderPayloadDTO | None:
        """
        Validate the customer form and send the order through the outbound link.

        On a validation failure the session stays in MESSAGE_FORM with the
        entered data kept. On success the host opens the link, the clear
        policy is applied and the session returns to IDLE.

        Args:
            customer: Form data (CustomerDTO or dict)

        Returns:
            OrderPayloadDTO, or None if the order was not sent
        """
        try:
            self._require(CheckoutMode.MESSAGE_FORM)
            payload = self._build_order_payload(customer)
        except ShopCartException as e:
            self.context.notifications.report(e)
            return None

        if self.context.call_host(self.context.on_before_send, payload) is False:
            logger.info(f"Order {payload.order_id} vetoed by host before sending")
            self.context.notifications.info(TextEntity.CHECKOUT, "order_not_sent")
            return None

        self.context.call_host(self.context.open_link, payload.link)
        logger.info(f"Order {payload.order_id} sent: {len(payload.lines)} line(s), total {payload.pricing.total}")
        self.context.notifications.success(TextEntity.CHECKOUT, "order_sent")
        self._complete(CheckoutMethod.MESSAGE, payload)
        return payload

    def _build_order_payload(self, customer: CustomerDTO | dict) -> OrderPayloadDTO:
        settings = self.context.settings
        if not isinstance(customer, CustomerDTO):
            try:
                customer = CustomerDTO.model_validate(customer)
            except ValidationError as e:
                raise OrderValidationException(
                    [f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()]
                )
        self.session.customer = customer
        self._check_cart_ready()

        lines = self.cart.get_lines()
        missing_fields, errors = validate_order(
            customer,
            self.cart.get_total(),
            settings,
            lambda amount: PricingService.format_price(amount, settings)
        )
        if missing_fields:
            raise MissingFieldException(missing_fields)
        if errors:
            raise OrderValidationException(errors)

        # Tax only when the store shows it in messages; the receipt always includes it
        pricing = PricingService.compute(
            lines, settings.pricing, customer.delivery_option, include_tax=settings.show_tax_in_message
        )
        if self.session.order_id is None:
            self.session.order_id = self.order_ids.next_id()
        self.session.delivery_option = customer.delivery_option

        created_at = self.context.clock()
        order_lines = InvoiceFormatterService.build_order_lines(lines)
        message = InvoiceFormatterService.format_order_message(
            self.session.order_id, created_at, customer, order_lines, pricing, settings
        )
        return OrderPayloadDTO(
            order_id=self.session.order_id,
            created_at=created_at,
            customer=customer,
            lines=order_lines,
            pricing=pricing,
            message=message,
            link=InvoiceFormatterService.build_message_link(message, settings)
        )

    # Point-of-sale receipt branch

    def select_receipt(self, delivery_option: DeliveryOption = DeliveryOption.HOME) -> ReceiptDTO | None:
        """
        Generate the point-of-sale receipt (tax invoice) for the committed cart.

        Returns:
            ReceiptDTO, or None if not allowed in the current state
        """
        settings = self.context.settings
        try:
            self._require(CheckoutMode.METHOD_SELECT)
            self._check_cart_ready()
        except ShopCartException as e:
            self.context.notifications.report(e)
            return None

        lines = self.cart.get_lines()
        pricing = PricingService.compute(lines, settings.pricing, delivery_option, include_tax=True)
        order_id = self.order_ids.next_id()
        created_at = self.context.clock()
        order_lines = InvoiceFormatterService.build_order_lines(lines)
        receipt = ReceiptDTO(
            order_id=order_id,
            created_at=created_at,
            lines=order_lines,
            pricing=pricing,
            text=InvoiceFormatterService.format_receipt_text(order_id, created_at, order_lines, pricing, settings),
            html=InvoiceFormatterService.format_receipt_html(order_id, created_at, order_lines, pricing, settings)
        )

        self._transition(CheckoutMode.RECEIPT_VIEW)
        self.session.order_id = order_id
        self.session.delivery_option = delivery_option
        self.session.receipt = receipt

        logger.info(f"Receipt {order_id} generated: subtotal {pricing.subtotal}, "
                    f"delivery {pricing.delivery_charge}, tax {pricing.tax}, total {pricing.total}")
        self.context.notifications.success(TextEntity.CHECKOUT, "receipt_ready", order_id=order_id)
        self.context.call_host(self.context.on_checkout_complete, CheckoutMethod.RECEIPT.value, receipt)
        self._apply_clear_policy(CheckoutMethod.RECEIPT)
        return receipt

    def print_receipt(self) -> bool:
        """Hand the receipt content (and only the receipt) to the host print surface."""
        try:
            self._require(CheckoutMode.RECEIPT_VIEW)
        except ShopCartException as e:
            self.context.notifications.report(e)
            return False

        if self.session.receipt is None:
            self.context.notifications.info(TextEntity.CHECKOUT, "nothing_to_print")
            return False

        self.context.call_host(self.context.print_receipt, self.session.receipt.html)
        return True

    # Internals

    def _check_cart_ready(self) -> None:
        if self.cart.is_empty():
            raise EmptyCartException()
        if self.staging.has_pending():
            raise UnsavedEditsException(self.staging.pending_count())

    def _require(self, required: CheckoutMode) -> None:
        if self.mode != required:
            raise InvalidCheckoutStateException(self.mode.value, required.value)

    def _transition(self, to_mode: CheckoutMode) -> None:
        from_mode = self.mode
        session_label = self.session.order_id if self.session and self.session.order_id else "new"
        if not CheckoutStateMachine.validate_and_log_transition(session_label, from_mode, to_mode):
            raise InvalidCheckoutStateException(from_mode.value, to_mode.value)

        if to_mode == CheckoutMode.IDLE:
            self.session = None
        elif self.session is None or CheckoutStateMachine.discards_session_data(from_mode, to_mode):
            self.session = CheckoutSessionDTO(mode=to_mode)
        else:
            self.session.mode = to_mode

    def _complete(self, method: CheckoutMethod, payload: OrderPayloadDTO) -> None:
        self.context.call_host(self.context.on_checkout_complete, method.value, payload)
        self._apply_clear_policy(method)
        self._transition(CheckoutMode.IDLE)

    def _apply_clear_policy(self, method: CheckoutMethod) -> None:
        if self.context.settings.cart_clear_policy.applies_to(method):
            self.cart.clear_after_checkout()
