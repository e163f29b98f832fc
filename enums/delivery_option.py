from enum import Enum


class DeliveryOption(str, Enum):
    HOME = "home"
    PICKUP = "pickup"

    def get_label_key(self) -> str:
        """Localization key for the delivery type label."""
        if self == DeliveryOption.PICKUP:
            return "delivery_store_pickup"
        return "delivery_home"
