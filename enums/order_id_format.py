from enum import Enum


class OrderIdFormat(str, Enum):
    TIMESTAMP = "timestamp"  # ORD1760745600123
    SEQUENCE = "sequence"    # SHOP-001-20261018


class OrderDateFormat(str, Enum):
    YYYYMMDD = "YYYYMMDD"
    DDMMYYYY = "DDMMYYYY"
