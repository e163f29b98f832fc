"""
Custom exceptions for ShopCart.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the cart and checkout engine.

Exception Hierarchy:
--------------------
ShopCartException (base)
├── CartException
│   ├── ProductNotFoundException
│   ├── OutOfStockException
│   ├── StockClampedException
│   ├── InvalidQuantityException
│   └── EmptyCartException
├── CheckoutException
│   ├── UnsavedEditsException
│   ├── MissingFieldException
│   ├── OrderValidationException
│   └── InvalidCheckoutStateException
└── StorageException
    └── PersistenceWriteFailedException

Usage:
------
Services raise specific exceptions internally:
    raise ProductNotFoundException(product_id="P1")

Public service entry points catch them and report through the notification channel:
    try:
        self._add_line(product_id, quantity)
    except ShopCartException as e:
        self.context.notifications.report(e)
"""

from .base import ShopCartException
from .cart import (
    CartException,
    ProductNotFoundException,
    OutOfStockException,
    StockClampedException,
    InvalidQuantityException,
    EmptyCartException
)
from .checkout import (
    CheckoutException,
    UnsavedEditsException,
    MissingFieldException,
    OrderValidationException,
    InvalidCheckoutStateException
)
from .storage import StorageException, PersistenceWriteFailedException

__all__ = [
    # Base
    'ShopCartException',

    # Cart
    'CartException',
    'ProductNotFoundException',
    'OutOfStockException',
    'StockClampedException',
    'InvalidQuantityException',
    'EmptyCartException',

    # Checkout
    'CheckoutException',
    'UnsavedEditsException',
    'MissingFieldException',
    'OrderValidationException',
    'InvalidCheckoutStateException',

    # Storage
    'StorageException',
    'PersistenceWriteFailedException',
]
