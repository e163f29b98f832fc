import logging
from typing import Callable, Optional

from enums.notification_severity import NotificationSeverity
from enums.text_entity import TextEntity
from exceptions import ShopCartException
from utils.error_handler import handle_service_error
from utils.localizator import Localizator

logger = logging.getLogger(__name__)

NotifyCallback = Callable[[str, str], None]


class NotificationService:
    """
    Sends success/warning/error text to the host's notification channel.

    The engine never renders notifications itself: every message goes through
    the host's notify(severity, message) callback and is logged.
    """

    def __init__(self, notify: Optional[NotifyCallback] = None, lang: Optional[str] = None):
        self._notify = notify
        self.lang = lang

    def notify(self, severity: NotificationSeverity, message: str) -> None:
        logger.info(f"Notification [{severity.value}]: {message}")
        if self._notify is None:
            return
        try:
            self._notify(severity.value, message)
        except Exception as e:
            logger.error(f"Host notification callback failed: {e}")

    def send(self, severity: NotificationSeverity, entity: TextEntity, key: str, **format_args) -> None:
        message = Localizator.get_text(entity, key, lang=self.lang)
        if format_args:
            message = message.format(**format_args)
        self.notify(severity, message)

    def success(self, entity: TextEntity, key: str, **format_args) -> None:
        self.send(NotificationSeverity.SUCCESS, entity, key, **format_args)

    def info(self, entity: TextEntity, key: str, **format_args) -> None:
        self.send(NotificationSeverity.INFO, entity, key, **format_args)

    def warning(self, entity: TextEntity, key: str, **format_args) -> None:
        self.send(NotificationSeverity.WARNING, entity, key, **format_args)

    def error(self, entity: TextEntity, key: str, **format_args) -> None:
        self.send(NotificationSeverity.ERROR, entity, key, **format_args)

    def report(self, exception: ShopCartException) -> None:
        """Report a handled service exception: exactly one notification per exception."""
        severity, message = handle_service_error(exception, lang=self.lang)
        self.notify(severity, message)
