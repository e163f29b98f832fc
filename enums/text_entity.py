from enum import Enum


class TextEntity(Enum):
    CART = 1
    CHECKOUT = 2
    COMMON = 3
