"""
Order Validation Utility

Validates message-order submissions for:
- Required customer fields (non-empty after trimming)
- Optional phone number format (10-digit mobile numbers)
- Optional e-mail format
- Optional minimum / maximum order amount
"""

import logging
import re
from typing import Callable

from enums.text_entity import TextEntity
from models.checkout import CustomerDTO
from models.settings import StoreSettings
from utils.localizator import Localizator

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def find_missing_fields(customer: CustomerDTO, required_fields: list[str]) -> list[str]:
    """
    Return the required fields that are empty after trimming.

    Args:
        customer: Submitted customer details
        required_fields: Field names, e.g. ["name", "phone", "address"]

    Returns:
        Missing field names in the order they were configured

    Example:
        >>> find_missing_fields(CustomerDTO(name="Asha", phone=" "), ["name", "phone"])
        ['phone']
    """
    missing = []
    for field in required_fields:
        value = getattr(customer, field, None)
        if value is None:
            value = customer.extra_fields.get(field)
        if value is None or str(value).strip() == "":
            missing.append(field)
    return missing


def validate_phone_number(phone: str) -> bool:
    """
    Validate a mobile number: exactly 10 digits once separators are removed.

    Example:
        >>> validate_phone_number("98765 43210")
        True
        >>> validate_phone_number("12345")
        False
    """
    digits = re.sub(r'\D', '', phone or "")
    return len(digits) == 10


def validate_email_address(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def validate_order_amount(subtotal: float, min_amount: float, max_amount: float) -> tuple[bool, str | None]:
    """
    Validate the order subtotal against configured limits (0 disables a limit).

    Returns:
        tuple: (is_valid, error_key)
            - (True, None) if valid
            - (False, "error_min_order" | "error_max_order") if invalid
    """
    if min_amount > 0 and subtotal < min_amount:
        return False, "error_min_order"
    if max_amount > 0 and subtotal > max_amount:
        return False, "error_max_order"
    return True, None


def validate_order(
    customer: CustomerDTO,
    subtotal: float,
    settings: StoreSettings,
    format_price: Callable[[float], str]
) -> tuple[list[str], list[str]]:
    """
    Run every configured check on a message-order submission.

    Args:
        customer: Submitted customer details
        subtotal: Committed cart subtotal
        settings: Store settings (required fields, optional checks, limits)
        format_price: Formats amounts in localized error messages

    Returns:
        tuple: (missing_fields, errors)
            - missing_fields: required fields left empty
            - errors: localized messages for format and amount checks
    """
    lang = settings.language
    missing_fields = find_missing_fields(customer, settings.required_fields)
    errors = []

    if settings.validate_phone and customer.phone and not validate_phone_number(customer.phone):
        errors.append(Localizator.get_text(TextEntity.CHECKOUT, "error_phone_digits", lang=lang))

    if settings.validate_email and customer.email and not validate_email_address(customer.email):
        errors.append(Localizator.get_text(TextEntity.CHECKOUT, "error_invalid_email", lang=lang))

    is_valid, error_key = validate_order_amount(subtotal, settings.min_order_amount, settings.max_order_amount)
    if not is_valid:
        limit = settings.min_order_amount if error_key == "error_min_order" else settings.max_order_amount
        errors.append(
            Localizator.get_text(TextEntity.CHECKOUT, error_key, lang=lang).format(amount=format_price(limit))
        )

    if missing_fields or errors:
        logger.info(f"Order validation failed: missing={missing_fields}, errors={len(errors)}")

    return missing_fields, errors
