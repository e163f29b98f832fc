import os
import sys

from dotenv import load_dotenv

from enums.cart_clear_policy import CartClearPolicy
from enums.currency_position import CurrencyPosition
from enums.message_template import MessageTemplate
from enums.order_id_format import OrderIdFormat, OrderDateFormat
from enums.storage_backend import StorageBackend

# Load .env but don't override existing environment variables
# This allows test scripts to set values before import
load_dotenv(".env", override=False)


def _exit_with_config_error(name: str, reason: Exception, expected: str):
    print(f"\n ERROR: Invalid {name} configuration\n", file=sys.stderr)
    print(f"Reason: {reason}", file=sys.stderr)
    print(f"Expected: {expected}", file=sys.stderr)
    print(f"Current value: {os.environ.get(name, '(not set)')}\n", file=sys.stderr)
    sys.exit(1)


def _parse_enum(name: str, enum_cls, default: str):
    try:
        return enum_cls(os.environ.get(name, default))
    except ValueError as e:
        valid_values = [member.value for member in enum_cls]
        _exit_with_config_error(name, e, f"one of {', '.join(valid_values)}")


def _parse_float(name: str, default: str, minimum: float = 0.0) -> float:
    try:
        value = float(os.environ.get(name, default))
        if value < minimum:
            raise ValueError(f"{name} must be >= {minimum} (got: {value})")
        return value
    except ValueError as e:
        _exit_with_config_error(name, e, f"number >= {minimum}")


def _parse_int(name: str, default: str, minimum: int = 0) -> int:
    try:
        value = int(os.environ.get(name, default))
        if value < minimum:
            raise ValueError(f"{name} must be >= {minimum} (got: {value})")
        return value
    except ValueError as e:
        _exit_with_config_error(name, e, f"integer >= {minimum}")


STORE_LANGUAGE = os.environ.get("STORE_LANGUAGE", "en")  # Default to English

# Business details (receipt header, outbound order link)
BUSINESS_NAME = os.environ.get("BUSINESS_NAME", "ShopHub")
BUSINESS_PHONE = os.environ.get("BUSINESS_PHONE", "9134567890")
COUNTRY_CODE = os.environ.get("COUNTRY_CODE", "91")
BUSINESS_EMAIL = os.environ.get("BUSINESS_EMAIL", "support@shop.com")
BUSINESS_WEBSITE = os.environ.get("BUSINESS_WEBSITE", "")  # Empty: derived from BUSINESS_NAME

# Currency display
CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "₹")
CURRENCY_POSITION = _parse_enum("CURRENCY_POSITION", CurrencyPosition, "before")

# Pricing Configuration
DELIVERY_CHARGE = _parse_float("DELIVERY_CHARGE", "50")
FREE_DELIVERY_ABOVE = _parse_float("FREE_DELIVERY_ABOVE", "1000")
TAX_RATE = _parse_float("TAX_RATE", "0.18")  # 18% GST
TAX_LABEL = os.environ.get("TAX_LABEL", "GST")

# The message order omits tax unless explicitly enabled (receipt always shows it)
SHOW_TAX_IN_MESSAGE = os.environ.get("SHOW_TAX_IN_MESSAGE", "false") == "true"

# Order text / order id
MESSAGE_TEMPLATE = _parse_enum("MESSAGE_TEMPLATE", MessageTemplate, "default")
GROUP_BY_CATEGORY = os.environ.get("GROUP_BY_CATEGORY", "false") == "true"  # Order items listed under category headings
ORDER_ID_FORMAT = _parse_enum("ORDER_ID_FORMAT", OrderIdFormat, "timestamp")
ORDER_PREFIX = os.environ.get("ORDER_PREFIX", "SHOP")
ORDER_START_NUMBER = _parse_int("ORDER_START_NUMBER", "1", minimum=1)
ORDER_DATE_FORMAT = _parse_enum("ORDER_DATE_FORMAT", OrderDateFormat, "YYYYMMDD")

# Checkout policy
CART_CLEAR_POLICY = _parse_enum("CART_CLEAR_POLICY", CartClearPolicy, "never")
VALIDATE_PHONE = os.environ.get("VALIDATE_PHONE", "false") == "true"  # 10-digit mobile numbers
VALIDATE_EMAIL = os.environ.get("VALIDATE_EMAIL", "false") == "true"
MIN_ORDER_AMOUNT = _parse_float("MIN_ORDER_AMOUNT", "0")  # 0 = disabled
MAX_ORDER_AMOUNT = _parse_float("MAX_ORDER_AMOUNT", "0")  # 0 = disabled

# Quantity input debounce (typed values and +/- taps)
QUANTITY_DEBOUNCE_MS = _parse_int("QUANTITY_DEBOUNCE_MS", "300")

# Cart persistence
CART_STORAGE_KEY = os.environ.get("CART_STORAGE_KEY", "shopcart_items")
CART_STORAGE_BACKEND = _parse_enum("CART_STORAGE_BACKEND", StorageBackend, "memory")
REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")
REDIS_PORT = _parse_int("REDIS_PORT", "6379", minimum=1)
REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD")

# Logging Configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask customer data in logs
LOG_RETENTION_DAYS = _parse_int("LOG_RETENTION_DAYS", "5", minimum=1)
LOG_DIR = os.environ.get("LOG_DIR", "logs")
