from pydantic import BaseModel, Field

from enums.delivery_option import DeliveryOption


class PricingConfigDTO(BaseModel):
    """Store pricing rules shared by both checkout branches."""
    delivery_charge: float = Field(default=50.0, ge=0)
    free_delivery_above: float = Field(default=1000.0, ge=0)
    tax_rate: float = Field(default=0.18, ge=0)
    tax_label: str = "GST"


class PricingBreakdownDTO(BaseModel):
    """Derived pricing result. Never stored, recomputed on demand."""
    subtotal: float
    delivery_charge: float
    tax: float = 0.0
    tax_rate: float = 0.0
    total: float
    delivery_option: DeliveryOption = DeliveryOption.HOME
    includes_tax: bool = False

    @property
    def tax_percent(self) -> str:
        return f"{self.tax_rate * 100:.0f}"
