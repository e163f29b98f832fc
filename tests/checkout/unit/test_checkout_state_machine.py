"""
Tests for the checkout state machine (utils/checkout_state_machine.py).
"""

import pytest

from enums.checkout_mode import CheckoutMode
from utils.checkout_state_machine import CheckoutStateMachine


class TestCheckoutStateMachine:

    @pytest.mark.parametrize("from_mode,to_mode", [
        (CheckoutMode.IDLE, CheckoutMode.METHOD_SELECT),
        (CheckoutMode.METHOD_SELECT, CheckoutMode.MESSAGE_FORM),
        (CheckoutMode.METHOD_SELECT, CheckoutMode.RECEIPT_VIEW),
        (CheckoutMode.MESSAGE_FORM, CheckoutMode.IDLE),
        (CheckoutMode.RECEIPT_VIEW, CheckoutMode.METHOD_SELECT),
    ])
    def test_valid_transitions(self, from_mode, to_mode):
        assert CheckoutStateMachine.is_valid_transition(from_mode, to_mode)

    @pytest.mark.parametrize("from_mode,to_mode", [
        (CheckoutMode.IDLE, CheckoutMode.MESSAGE_FORM),
        (CheckoutMode.IDLE, CheckoutMode.RECEIPT_VIEW),
        (CheckoutMode.MESSAGE_FORM, CheckoutMode.RECEIPT_VIEW),
        (CheckoutMode.RECEIPT_VIEW, CheckoutMode.MESSAGE_FORM),
    ])
    def test_invalid_transitions(self, from_mode, to_mode):
        assert not CheckoutStateMachine.is_valid_transition(from_mode, to_mode)

    def test_same_mode_is_allowed(self):
        assert CheckoutStateMachine.is_valid_transition(CheckoutMode.MESSAGE_FORM, CheckoutMode.MESSAGE_FORM)

    def test_back_discards_session_data(self):
        assert CheckoutStateMachine.discards_session_data(CheckoutMode.MESSAGE_FORM, CheckoutMode.METHOD_SELECT)
        assert not CheckoutStateMachine.discards_session_data(CheckoutMode.METHOD_SELECT, CheckoutMode.MESSAGE_FORM)

    def test_next_modes_from_method_select(self):
        assert CheckoutStateMachine.get_valid_transitions(CheckoutMode.METHOD_SELECT) == [
            CheckoutMode.IDLE,
            CheckoutMode.MESSAGE_FORM,
            CheckoutMode.RECEIPT_VIEW,
        ]

    def test_invalid_transition_is_logged(self, caplog):
        assert not CheckoutStateMachine.validate_and_log_transition("new", CheckoutMode.IDLE, CheckoutMode.RECEIPT_VIEW)
        assert "Invalid checkout transition" in caplog.text
        assert "(allowed: METHOD_SELECT)" in caplog.text

    def test_valid_transition_is_audited(self, caplog):
        caplog.set_level("INFO")
        assert CheckoutStateMachine.validate_and_log_transition("ORD1", CheckoutMode.IDLE, CheckoutMode.METHOD_SELECT)
        assert "CHECKOUT_TRANSITION: Session ORD1" in caplog.text
