from enum import Enum


class NotificationSeverity(str, Enum):
    ERROR = "error"        # Not found, empty cart
    WARNING = "warning"    # Clamped, invalid, unsaved edits, persistence
    INFO = "info"          # Routine confirmations
    SUCCESS = "success"    # Completed actions
