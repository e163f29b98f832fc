from enum import Enum


class MessageTemplate(str, Enum):
    DEFAULT = "default"
    MINIMAL = "minimal"
    DETAILED = "detailed"
