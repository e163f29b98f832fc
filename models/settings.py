from pydantic import BaseModel, Field

from enums.cart_clear_policy import CartClearPolicy
from enums.currency_position import CurrencyPosition
from enums.message_template import MessageTemplate
from enums.order_id_format import OrderIdFormat, OrderDateFormat
from models.pricing import PricingConfigDTO


class StoreSettings(BaseModel):
    """
    Typed store configuration handed to every service through the context.

    Built from the environment-driven config module with from_config(), or
    constructed directly (tests, hosts with their own configuration source).
    """
    language: str = "en"

    business_name: str = "ShopHub"
    business_phone: str = "9134567890"
    country_code: str = "91"
    business_email: str = "support@shop.com"
    business_website: str = ""

    currency_symbol: str = "₹"
    currency_position: CurrencyPosition = CurrencyPosition.BEFORE

    pricing: PricingConfigDTO = Field(default_factory=PricingConfigDTO)
    show_tax_in_message: bool = False

    message_template: MessageTemplate = MessageTemplate.DEFAULT
    group_by_category: bool = False
    order_id_format: OrderIdFormat = OrderIdFormat.TIMESTAMP
    order_prefix: str = "SHOP"
    order_start_number: int = Field(default=1, ge=1)
    order_date_format: OrderDateFormat = OrderDateFormat.YYYYMMDD

    cart_clear_policy: CartClearPolicy = CartClearPolicy.NEVER
    required_fields: list[str] = Field(default_factory=lambda: ["name", "phone", "address"])
    validate_phone: bool = False
    validate_email: bool = False
    min_order_amount: float = Field(default=0.0, ge=0)  # 0 = disabled
    max_order_amount: float = Field(default=0.0, ge=0)  # 0 = disabled

    quantity_debounce_ms: int = Field(default=300, ge=0)
    cart_storage_key: str = "shopcart_items"

    @property
    def website(self) -> str:
        if self.business_website:
            return self.business_website
        return f"www.{self.business_name.lower().replace(' ', '')}.com"

    @property
    def message_phone_number(self) -> str:
        """Business phone in international format, digits only (for the deep link)."""
        return "".join(ch for ch in f"{self.country_code}{self.business_phone}" if ch.isdigit())

    @classmethod
    def from_config(cls) -> "StoreSettings":
        import config

        return cls(
            language=config.STORE_LANGUAGE,
            business_name=config.BUSINESS_NAME,
            business_phone=config.BUSINESS_PHONE,
            country_code=config.COUNTRY_CODE,
            business_email=config.BUSINESS_EMAIL,
            business_website=config.BUSINESS_WEBSITE,
            currency_symbol=config.CURRENCY_SYMBOL,
            currency_position=config.CURRENCY_POSITION,
            pricing=PricingConfigDTO(
                delivery_charge=config.DELIVERY_CHARGE,
                free_delivery_above=config.FREE_DELIVERY_ABOVE,
                tax_rate=config.TAX_RATE,
                tax_label=config.TAX_LABEL
            ),
            show_tax_in_message=config.SHOW_TAX_IN_MESSAGE,
            message_template=config.MESSAGE_TEMPLATE,
            group_by_category=config.GROUP_BY_CATEGORY,
            order_id_format=config.ORDER_ID_FORMAT,
            order_prefix=config.ORDER_PREFIX,
            order_start_number=config.ORDER_START_NUMBER,
            order_date_format=config.ORDER_DATE_FORMAT,
            cart_clear_policy=config.CART_CLEAR_POLICY,
            validate_phone=config.VALIDATE_PHONE,
            validate_email=config.VALIDATE_EMAIL,
            min_order_amount=config.MIN_ORDER_AMOUNT,
            max_order_amount=config.MAX_ORDER_AMOUNT,
            quantity_debounce_ms=config.QUANTITY_DEBOUNCE_MS,
            cart_storage_key=config.CART_STORAGE_KEY
        )
