"""
Error Handler Utility for Cart and Checkout Services

Provides centralized error handling for service entry points with:
- Exactly one notification severity per exception type
- Localized error messages
- Logging for debugging

Usage in services:
    from utils.error_handler import handle_service_error

    try:
        self._add_line(product_id, quantity)
    except ShopCartException as e:
        severity, message = handle_service_error(e, lang="en")
        notify(severity, message)
"""

import logging
from typing import Optional

from enums.notification_severity import NotificationSeverity
from enums.text_entity import TextEntity
from exceptions import (
    ShopCartException,
    ProductNotFoundException,
    OutOfStockException,
    StockClampedException,
    InvalidQuantityException,
    EmptyCartException,
    UnsavedEditsException,
    MissingFieldException,
    OrderValidationException,
    InvalidCheckoutStateException,
    PersistenceWriteFailedException,
)
from utils.localizator import Localizator

logger = logging.getLogger(__name__)

# Map exception types to (severity, text entity, localization key)
ERROR_MAPPING: dict[type, tuple[NotificationSeverity, TextEntity, str]] = {
    # Cart exceptions
    ProductNotFoundException: (NotificationSeverity.ERROR, TextEntity.CART, "product_not_found"),
    OutOfStockException: (NotificationSeverity.WARNING, TextEntity.CART, "out_of_stock"),
    StockClampedException: (NotificationSeverity.WARNING, TextEntity.CART, "stock_clamped"),
    InvalidQuantityException: (NotificationSeverity.WARNING, TextEntity.CART, "invalid_quantity"),
    EmptyCartException: (NotificationSeverity.ERROR, TextEntity.CHECKOUT, "empty_cart"),

    # Checkout exceptions
    UnsavedEditsException: (NotificationSeverity.WARNING, TextEntity.CHECKOUT, "unsaved_edits"),
    MissingFieldException: (NotificationSeverity.WARNING, TextEntity.CHECKOUT, "missing_field"),
    OrderValidationException: (NotificationSeverity.WARNING, TextEntity.CHECKOUT, "validation_failed"),
    InvalidCheckoutStateException: (NotificationSeverity.WARNING, TextEntity.CHECKOUT, "invalid_state"),

    # Storage exceptions
    PersistenceWriteFailedException: (NotificationSeverity.WARNING, TextEntity.CART, "persistence_failed"),
}


def get_error_severity(exception: ShopCartException) -> NotificationSeverity:
    """Severity the notification channel receives for this exception type."""
    mapping = ERROR_MAPPING.get(type(exception))
    if not mapping:
        return NotificationSeverity.ERROR
    return mapping[0]


def handle_service_error(
    exception: ShopCartException,
    lang: Optional[str] = None
) -> tuple[NotificationSeverity, str]:
    """
    Convert service exception to a severity and a localized user-friendly message.

    Args:
        exception: The custom exception raised by a service
        lang: Language of the store (None = config.STORE_LANGUAGE)

    Returns:
        (severity, message) tuple for the notification channel

    Example:
        try:
            checkout.start()
        except EmptyCartException as e:
            severity, message = handle_service_error(e)
            # (NotificationSeverity.ERROR, "Your cart is empty!")
    """
    logger.warning(f"Service error handled: {type(exception).__name__} - {str(exception)}")

    mapping = ERROR_MAPPING.get(type(exception))

    if not mapping:
        # Unknown exception type - use generic error message
        logger.error(f"Unmapped exception type: {type(exception).__name__}")
        return NotificationSeverity.ERROR, Localizator.get_text(TextEntity.COMMON, "error_unexpected", lang=lang)

    severity, entity, localization_key = mapping

    # Get exception attributes for formatting
    exception_data = {}

    if hasattr(exception, 'product_id'):
        exception_data['product_id'] = exception.product_id
    if hasattr(exception, 'title'):
        exception_data['title'] = exception.title
    if hasattr(exception, 'requested'):
        exception_data['requested'] = exception.requested
    if hasattr(exception, 'available'):
        exception_data['available'] = exception.available
    if hasattr(exception, 'value'):
        exception_data['value'] = exception.value
    if hasattr(exception, 'pending_count'):
        exception_data['pending_count'] = exception.pending_count
    if hasattr(exception, 'fields'):
        exception_data['fields'] = ", ".join(
            Localizator.get_field_label(field, lang=lang) for field in exception.fields
        )
    if hasattr(exception, 'errors'):
        exception_data['errors'] = "; ".join(exception.errors)
    if hasattr(exception, 'current_state'):
        exception_data['current_state'] = exception.current_state
    if hasattr(exception, 'required_state'):
        exception_data['required_state'] = exception.required_state
    if hasattr(exception, 'reason'):
        exception_data['reason'] = exception.reason

    try:
        return severity, Localizator.get_text(entity, localization_key, lang=lang).format(**exception_data)
    except KeyError as e:
        # Missing formatting parameter - log and return without formatting
        logger.error(f"Missing format parameter in error message: {e}")
        return severity, Localizator.get_text(entity, localization_key, lang=lang)
