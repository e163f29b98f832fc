from enum import Enum


class CurrencyPosition(str, Enum):
    BEFORE = "before"  # ₹100.00
    AFTER = "after"    # 100.00€
