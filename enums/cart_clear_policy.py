from enum import Enum


class CheckoutMethod(str, Enum):
    MESSAGE = "message"
    RECEIPT = "receipt"


class CartClearPolicy(str, Enum):
    """
    When the committed cart is emptied after a completed checkout.

    The storefront never cleared the cart on its own, so NEVER is the default.
    """
    NEVER = "never"
    AFTER_MESSAGE = "after_message"
    AFTER_RECEIPT = "after_receipt"
    ALWAYS = "always"

    def applies_to(self, method: CheckoutMethod) -> bool:
        if self == CartClearPolicy.ALWAYS:
            return True
        if self == CartClearPolicy.AFTER_MESSAGE:
            return method == CheckoutMethod.MESSAGE
        if self == CartClearPolicy.AFTER_RECEIPT:
            return method == CheckoutMethod.RECEIPT
        return False
