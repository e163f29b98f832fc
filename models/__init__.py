"""
Models Package

Pydantic DTOs shared by the cart, staging, pricing and checkout services.
"""

from models.product import ProductDTO, ProductId
from models.cart_line import (
    CartLine,
    CartLineRecordDTO,
    Committed,
    CommittedWithPendingEdit,
    LineQuantityState
)
from models.cart_view import CartViewDTO, CartViewLineDTO
from models.pricing import PricingConfigDTO, PricingBreakdownDTO
from models.checkout import (
    CustomerDTO,
    OrderLineDTO,
    OrderPayloadDTO,
    ReceiptDTO,
    CheckoutSessionDTO
)
from models.settings import StoreSettings

__all__ = [
    'ProductDTO',
    'ProductId',
    'CartLine',
    'CartLineRecordDTO',
    'Committed',
    'CommittedWithPendingEdit',
    'LineQuantityState',
    'CartViewDTO',
    'CartViewLineDTO',
    'PricingConfigDTO',
    'PricingBreakdownDTO',
    'CustomerDTO',
    'OrderLineDTO',
    'OrderPayloadDTO',
    'ReceiptDTO',
    'CheckoutSessionDTO',
    'StoreSettings',
]
