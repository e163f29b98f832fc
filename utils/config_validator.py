"""
Configuration Validation Module

Validates store settings at startup to fail-fast with clear error messages
instead of broken order links or nonsensical prices at checkout.
"""

import logging
import sys

from models.settings import StoreSettings

KNOWN_CUSTOMER_FIELDS = {"name", "phone", "address", "email"}


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


def validate_business_phone(settings: StoreSettings) -> None:
    """
    Validate the number the message order link is addressed to.

    Raises:
        ConfigValidationError: If the phone has no digits or too few of them
    """
    digits = settings.message_phone_number
    if len(digits) < 8:
        raise ConfigValidationError(
            f"COUNTRY_CODE + BUSINESS_PHONE must contain at least 8 digits (got: '{digits}')\n"
            "Example: COUNTRY_CODE=91 BUSINESS_PHONE=9134567890"
        )


def validate_pricing(settings: StoreSettings) -> None:
    """
    Validate pricing rules.

    Raises:
        ConfigValidationError: If the tax rate is not a fraction or the order limits contradict each other
    """
    if settings.pricing.tax_rate >= 1:
        raise ConfigValidationError(
            f"TAX_RATE must be a fraction below 1 (got: {settings.pricing.tax_rate})\n"
            "Example: TAX_RATE=0.18 for 18%"
        )

    if settings.max_order_amount and settings.min_order_amount > settings.max_order_amount:
        raise ConfigValidationError(
            f"MIN_ORDER_AMOUNT ({settings.min_order_amount}) is greater than "
            f"MAX_ORDER_AMOUNT ({settings.max_order_amount})"
        )


def validate_storage(settings: StoreSettings) -> None:
    if not settings.cart_storage_key or not settings.cart_storage_key.strip():
        raise ConfigValidationError("CART_STORAGE_KEY must not be empty")


def validate_required_fields(settings: StoreSettings) -> None:
    unknown = [field for field in settings.required_fields if field not in KNOWN_CUSTOMER_FIELDS]
    if unknown:
        logging.warning(f"Required fields {unknown} are not standard customer fields; "
                        f"they are looked up in the host's extra form fields")


def validate_startup_config(settings: StoreSettings) -> None:
    """
    Run all startup validations.

    Raises:
        ConfigValidationError: On the first failing check
    """
    validate_business_phone(settings)
    validate_pricing(settings)
    validate_storage(settings)
    validate_required_fields(settings)


def validate_or_exit(settings: StoreSettings) -> None:
    """Validate settings and exit with a readable message on failure."""
    try:
        validate_startup_config(settings)
    except ConfigValidationError as e:
        print("\n ERROR: Invalid store configuration\n", file=sys.stderr)
        print(f"{e}\n", file=sys.stderr)
        sys.exit(1)
