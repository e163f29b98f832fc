from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from enums.checkout_mode import CheckoutMode
from enums.delivery_option import DeliveryOption
from models.pricing import PricingBreakdownDTO
from models.product import ProductId


class CustomerDTO(BaseModel):
    """Customer details entered in the message order form."""
    model_config = ConfigDict(str_strip_whitespace=True, coerce_numbers_to_str=True)

    name: str = ""
    phone: str = ""
    address: str = ""
    email: str | None = None
    delivery_option: DeliveryOption = DeliveryOption.HOME
    extra_fields: dict[str, str] = Field(default_factory=dict)  # Host-defined form fields, label → value

    @field_validator('name', 'phone', 'address', mode='before')
    @classmethod
    def empty_when_missing(cls, v):
        """Form widgets send None for untouched fields; treat them as empty so they count as missing"""
        return "" if v is None else v


class OrderLineDTO(BaseModel):
    product_id: ProductId
    title: str
    quantity: int
    unit_price: float
    line_total: float
    category: str | None = None


class OrderPayloadDTO(BaseModel):
    """Result of a message-based order (sent via the outbound link)."""
    order_id: str
    created_at: datetime
    customer: CustomerDTO
    lines: list[OrderLineDTO]
    pricing: PricingBreakdownDTO
    message: str
    link: str | None = None


class ReceiptDTO(BaseModel):
    """Point-of-sale receipt, rendered as plain text and as escaped HTML."""
    order_id: str
    created_at: datetime
    lines: list[OrderLineDTO]
    pricing: PricingBreakdownDTO
    text: str
    html: str


class CheckoutSessionDTO(BaseModel):
    """Transient checkout state. Exists only between start() and the return to IDLE."""
    mode: CheckoutMode = CheckoutMode.METHOD_SELECT
    delivery_option: DeliveryOption = DeliveryOption.HOME
    customer: CustomerDTO | None = None
    order_id: str | None = None
    receipt: ReceiptDTO | None = None
