import logging
from typing import Iterable

from enums.currency_position import CurrencyPosition
from enums.delivery_option import DeliveryOption
from models.cart_line import CartLine
from models.pricing import PricingConfigDTO, PricingBreakdownDTO
from models.settings import StoreSettings

logger = logging.getLogger(__name__)


class PricingService:
    """Pure pricing calculations over committed cart quantities."""

    @staticmethod
    def calculate_subtotal(lines: Iterable[CartLine]) -> float:
        """Σ unit price × committed quantity. Pending edits are ignored."""
        return round(sum(line.unit_price * line.quantity for line in lines), 2)

    @staticmethod
    def calculate_delivery_charge(
        subtotal: float,
        pricing: PricingConfigDTO,
        delivery_option: DeliveryOption = DeliveryOption.HOME
    ) -> float:
        """
        Delivery is free for store pickup, for empty carts and from the free-delivery
        threshold upwards; otherwise the fixed configured charge applies.

        Example with charge 50 and threshold 1000:
            subtotal 999.99 → 50.00
            subtotal 1000   → 0.00
        """
        if delivery_option == DeliveryOption.PICKUP:
            return 0.0
        if subtotal <= 0 or subtotal >= pricing.free_delivery_above:
            return 0.0
        return round(pricing.delivery_charge, 2)

    @staticmethod
    def compute(
        lines: Iterable[CartLine],
        pricing: PricingConfigDTO,
        delivery_option: DeliveryOption = DeliveryOption.HOME,
        include_tax: bool = False
    ) -> PricingBreakdownDTO:
        """
        Compute the pricing breakdown of a committed cart.

        Tax is only added when include_tax is set. The two checkout branches
        differ on purpose: the point-of-sale receipt is a tax invoice and always
        passes include_tax=True, while the message order reports subtotal plus
        delivery and only includes tax when the store enables
        show_tax_in_message. Keep both call sites explicit.

        Algorithm:
            subtotal = Σ(unit_price × quantity)
            delivery = 0 if pickup or subtotal ≥ free_delivery_above else delivery_charge
            tax      = (subtotal + delivery) × tax_rate   (include_tax only)
            total    = subtotal + delivery + tax

        Example (receipt, charge 50, threshold 1000, 18% tax):
            subtotal 1200 → delivery 0, tax 216, total 1416

        Args:
            lines: Committed cart lines
            pricing: Store pricing rules
            delivery_option: HOME or PICKUP
            include_tax: Whether this checkout branch shows tax

        Returns:
            PricingBreakdownDTO with all amounts rounded to 2 decimals
        """
        subtotal = PricingService.calculate_subtotal(lines)
        delivery_charge = PricingService.calculate_delivery_charge(subtotal, pricing, delivery_option)

        tax = 0.0
        if include_tax:
            tax = round((subtotal + delivery_charge) * pricing.tax_rate, 2)

        total = round(subtotal + delivery_charge + tax, 2)

        logger.debug(f"Pricing computed: subtotal={subtotal}, delivery={delivery_charge}, "
                     f"tax={tax}, total={total}, option={delivery_option.value}")

        return PricingBreakdownDTO(
            subtotal=subtotal,
            delivery_charge=delivery_charge,
            tax=tax,
            tax_rate=pricing.tax_rate if include_tax else 0.0,
            total=total,
            delivery_option=delivery_option,
            includes_tax=include_tax
        )

    @staticmethod
    def format_price(amount: float, settings: StoreSettings) -> str:
        """
        Format an amount with the store currency.

        Example output:
            ₹1200.00   (currency_position=before)
            1200.00€   (currency_position=after)
        """
        formatted = f"{amount:.2f}"
        if settings.currency_position == CurrencyPosition.AFTER:
            return f"{formatted}{settings.currency_symbol}"
        return f"{settings.currency_symbol}{formatted}"
