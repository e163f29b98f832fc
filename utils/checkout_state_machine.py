"""
Checkout State Machine for validating checkout session transitions.

This module implements a finite state machine to ensure valid checkout mode
transitions and provide audit logging for all of them.
"""

import logging
from typing import Dict, List, Set

from enums.checkout_mode import CheckoutMode

logger = logging.getLogger(__name__)


class CheckoutTransition:
    """Represents a valid mode transition with metadata"""

    def __init__(self, from_mode: CheckoutMode, to_mode: CheckoutMode, discards_session_data: bool = False,
                 description: str = ""):
        self.from_mode = from_mode
        self.to_mode = to_mode
        self.discards_session_data = discards_session_data
        self.description = description

    def __repr__(self):
        discard_flag = " (discards)" if self.discards_session_data else ""
        return f"{self.from_mode.value} -> {self.to_mode.value}{discard_flag}"


class CheckoutStateMachine:
    """
    Finite state machine for checkout sessions.

    Valid transitions:
    - IDLE -> METHOD_SELECT (checkout started; guarded by empty cart / unsaved edits)
    - METHOD_SELECT -> MESSAGE_FORM (message order chosen)
    - METHOD_SELECT -> RECEIPT_VIEW (point-of-sale receipt generated)
    - MESSAGE_FORM -> IDLE (order sent, or closed)
    - MESSAGE_FORM / RECEIPT_VIEW -> METHOD_SELECT (back)
    - METHOD_SELECT / RECEIPT_VIEW -> IDLE (closed)

    Transitions back to METHOD_SELECT or IDLE discard session-local data
    (customer form, order id, receipt). None of them touch the cart.
    """

    VALID_TRANSITIONS: List[CheckoutTransition] = [
        # From IDLE
        CheckoutTransition(
            CheckoutMode.IDLE,
            CheckoutMode.METHOD_SELECT,
            description="Checkout started"
        ),

        # From METHOD_SELECT
        CheckoutTransition(
            CheckoutMode.METHOD_SELECT,
            CheckoutMode.MESSAGE_FORM,
            description="Message order selected"
        ),
        CheckoutTransition(
            CheckoutMode.METHOD_SELECT,
            CheckoutMode.RECEIPT_VIEW,
            description="Point-of-sale receipt generated"
        ),
        CheckoutTransition(
            CheckoutMode.METHOD_SELECT,
            CheckoutMode.IDLE,
            discards_session_data=True,
            description="Checkout closed"
        ),

        # From MESSAGE_FORM
        CheckoutTransition(
            CheckoutMode.MESSAGE_FORM,
            CheckoutMode.METHOD_SELECT,
            discards_session_data=True,
            description="Back to method selection"
        ),
        CheckoutTransition(
            CheckoutMode.MESSAGE_FORM,
            CheckoutMode.IDLE,
            discards_session_data=True,
            description="Order sent or checkout closed"
        ),

        # From RECEIPT_VIEW
        CheckoutTransition(
            CheckoutMode.RECEIPT_VIEW,
            CheckoutMode.METHOD_SELECT,
            discards_session_data=True,
            description="Back to method selection"
        ),
        CheckoutTransition(
            CheckoutMode.RECEIPT_VIEW,
            CheckoutMode.IDLE,
            discards_session_data=True,
            description="Receipt closed"
        ),
    ]

    # Build transition map for fast lookup
    _transition_map: Dict[CheckoutMode, Set[CheckoutMode]] = {}
    _discarding_transitions: Set[tuple] = set()
    _transition_descriptions: Dict[tuple, str] = {}

    @classmethod
    def _build_transition_map(cls):
        """Build internal transition maps"""
        if cls._transition_map:
            return  # Already built

        for transition in cls.VALID_TRANSITIONS:
            cls._transition_map.setdefault(transition.from_mode, set()).add(transition.to_mode)

            if transition.discards_session_data:
                cls._discarding_transitions.add((transition.from_mode, transition.to_mode))

            cls._transition_descriptions[(transition.from_mode, transition.to_mode)] = transition.description

    @classmethod
    def is_valid_transition(cls, from_mode: CheckoutMode, to_mode: CheckoutMode) -> bool:
        """
        Check if a mode transition is valid according to the state machine.

        Args:
            from_mode: Current checkout mode
            to_mode: Desired new mode

        Returns:
            True if transition is valid, False otherwise
        """
        cls._build_transition_map()

        # Allow staying in same mode (no-op)
        if from_mode == to_mode:
            return True

        return to_mode in cls._transition_map.get(from_mode, set())

    @classmethod
    def discards_session_data(cls, from_mode: CheckoutMode, to_mode: CheckoutMode) -> bool:
        """Check if a transition drops customer form data, order id and receipt."""
        cls._build_transition_map()
        return (from_mode, to_mode) in cls._discarding_transitions

    @classmethod
    def get_valid_transitions(cls, from_mode: CheckoutMode) -> List[CheckoutMode]:
        """
        Get all valid next modes from the current mode.

        Args:
            from_mode: Current checkout mode

        Returns:
            List of valid next modes
        """
        cls._build_transition_map()
        return sorted(cls._transition_map.get(from_mode, set()), key=lambda mode: mode.value)

    @classmethod
    def get_transition_description(cls, from_mode: CheckoutMode, to_mode: CheckoutMode) -> str:
        cls._build_transition_map()
        return cls._transition_descriptions.get(
            (from_mode, to_mode),
            f"Transition from {from_mode.value} to {to_mode.value}"
        )

    @classmethod
    def validate_and_log_transition(cls, session_label: str, from_mode: CheckoutMode,
                                    to_mode: CheckoutMode) -> bool:
        """
        Validate a mode transition and write an audit log entry.

        Args:
            session_label: Identifies the checkout session in logs (order id or "new")
            from_mode: Current checkout mode
            to_mode: Desired new mode

        Returns:
            True if transition is valid and logged, False otherwise
        """
        if not cls.is_valid_transition(from_mode, to_mode):
            allowed = ", ".join(mode.value for mode in cls.get_valid_transitions(from_mode))
            logger.error(f"Invalid checkout transition for session {session_label}: "
                         f"{from_mode.value} -> {to_mode.value} (allowed: {allowed})")
            return False

        transition_desc = cls.get_transition_description(from_mode, to_mode)
        logger.info(f"CHECKOUT_TRANSITION: Session {session_label} {from_mode.value} -> {to_mode.value}: "
                    f"{transition_desc}")

        return True
