"""
Checkout-related exceptions.
"""

from .base import ShopCartException


class CheckoutException(ShopCartException):
    """Base exception for checkout errors."""
    pass


class UnsavedEditsException(CheckoutException):
    """Raised when checkout starts while quantity edits are still pending."""

    def __init__(self, pending_count: int):
        super().__init__(
            f"{pending_count} unsaved quantity change(s) must be saved or cancelled first",
            details={'pending_count': pending_count}
        )
        self.pending_count = pending_count


class MissingFieldException(CheckoutException):
    """Raised when required customer fields are empty."""

    def __init__(self, fields: list[str]):
        super().__init__(
            f"Missing required field(s): {', '.join(fields)}",
            details={'fields': fields}
        )
        self.fields = fields


class OrderValidationException(CheckoutException):
    """Raised when customer data or order amount fails the configured checks."""

    def __init__(self, errors: list[str]):
        super().__init__(
            f"Order validation failed: {'; '.join(errors)}",
            details={'errors': errors}
        )
        self.errors = errors


class InvalidCheckoutStateException(CheckoutException):
    """Raised when a checkout action is not allowed in the current mode."""

    def __init__(self, current_state: str, required_state: str):
        super().__init__(
            f"Checkout is in state '{current_state}', required '{required_state}'",
            details={'current_state': current_state, 'required_state': required_state}
        )
        self.current_state = current_state
        self.required_state = required_state
