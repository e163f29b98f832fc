"""
Base exception classes for ShopCart.
"""


class ShopCartException(Exception):
    """
    Base exception for all cart and checkout errors.

    All custom exceptions in the engine inherit from this class, so a public
    service entry point can catch them with a single handler and report them
    through the notification channel instead of letting them reach the host.

    Attributes:
        message: Human-readable error message
        details: Optional dict with additional context (product ids, states, etc.)
    """

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation with context."""
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"
