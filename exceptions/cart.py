"""
Cart-related exceptions.
"""

from .base import ShopCartException


class CartException(ShopCartException):
    """Base exception for cart-related errors."""
    pass


class ProductNotFoundException(CartException):
    """Raised when a product id is not in the catalog (or not in the cart)."""

    def __init__(self, product_id: int | str):
        super().__init__(
            f"Product {product_id} not found",
            details={'product_id': product_id}
        )
        self.product_id = product_id


class OutOfStockException(CartException):
    """Raised when adding a product whose declared stock is 0."""

    def __init__(self, product_id: int | str, title: str):
        super().__init__(
            f"Product {product_id} ({title}) is out of stock",
            details={'product_id': product_id, 'title': title}
        )
        self.product_id = product_id
        self.title = title


class StockClampedException(CartException):
    """
    Reported when a requested quantity was reduced to the stock bound.

    Never raised to the host: the operation still succeeds with the clamped
    quantity and this is only passed to the notification channel.
    """

    def __init__(self, product_id: int | str, requested: int, available: int):
        super().__init__(
            f"Requested {requested} of product {product_id}, clamped to {available}",
            details={'product_id': product_id, 'requested': requested, 'available': available}
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidQuantityException(CartException):
    """Raised when a quantity cannot be parsed or would become negative."""

    def __init__(self, product_id: int | str, value):
        super().__init__(
            f"Invalid quantity {value!r} for product {product_id}",
            details={'product_id': product_id, 'value': value}
        )
        self.product_id = product_id
        self.value = value


class EmptyCartException(CartException):
    """Raised when trying to checkout with empty cart."""

    def __init__(self):
        super().__init__("Cart is empty")
