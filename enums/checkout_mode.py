from enum import Enum


class CheckoutMode(str, Enum):
    IDLE = "IDLE"                    # No checkout session
    METHOD_SELECT = "METHOD_SELECT"  # Choosing message order or receipt
    MESSAGE_FORM = "MESSAGE_FORM"    # Entering customer details for a message order
    RECEIPT_VIEW = "RECEIPT_VIEW"    # Point-of-sale receipt shown
