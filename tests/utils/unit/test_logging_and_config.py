"""
Tests for utils/logging_config.py (customer data masking) and
utils/config_validator.py (startup checks).
"""

import logging

import pytest

from models.pricing import PricingConfigDTO
from models.settings import StoreSettings
from utils.config_validator import ConfigValidationError, validate_or_exit, validate_startup_config
from utils.logging_config import SecretMaskingFilter


def masked(message: str, *args) -> str:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, message, args, None)
    SecretMaskingFilter().filter(record)
    return record.getMessage()


class TestSecretMaskingFilter:

    def test_masks_order_text_in_links(self):
        result = masked("Opening https://wa.me/919134567890?text=%2ANEW%20ORDER%2A")

        assert "NEW%20ORDER" not in result
        assert "[REDACTED_ORDER_TEXT]" in result

    def test_masks_email_and_phone(self):
        result = masked("Customer asha@example.com called from 987-654-3210")

        assert "asha@example.com" not in result
        assert "987-654-3210" not in result

    def test_masks_args(self):
        assert "asha@example.com" not in masked("Customer %s", "asha@example.com")

    def test_masks_redis_password(self):
        assert "hunter2" not in masked("Connecting with password=hunter2")

    def test_leaves_cart_messages_alone(self):
        assert masked("Cart line P1: 1 -> 2") == "Cart line P1: 1 -> 2"


class TestConfigValidator:

    def test_defaults_are_valid(self):
        validate_startup_config(StoreSettings())

    def test_short_phone(self):
        with pytest.raises(ConfigValidationError, match="BUSINESS_PHONE"):
            validate_startup_config(StoreSettings(country_code="", business_phone="123"))

    def test_tax_rate_must_be_fraction(self):
        with pytest.raises(ConfigValidationError, match="TAX_RATE"):
            validate_startup_config(StoreSettings(pricing=PricingConfigDTO(tax_rate=18)))

    def test_min_above_max(self):
        with pytest.raises(ConfigValidationError, match="MIN_ORDER_AMOUNT"):
            validate_startup_config(StoreSettings(min_order_amount=500, max_order_amount=100))

    def test_empty_storage_key(self):
        with pytest.raises(ConfigValidationError, match="CART_STORAGE_KEY"):
            validate_startup_config(StoreSettings(cart_storage_key="  "))

    def test_unknown_required_field_warns(self, caplog):
        validate_startup_config(StoreSettings(required_fields=["name", "landmark"]))

        assert "landmark" in caplog.text

    def test_validate_or_exit(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            validate_or_exit(StoreSettings(business_phone="1", country_code=""))

        assert exc_info.value.code == 1
        assert "Invalid store configuration" in capsys.readouterr().err
