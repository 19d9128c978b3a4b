"""
Calculator - валидация ввода, state machine и сессия калькулятора.
"""

from .calculator import Calculator, ConfirmCallback
from .config import CalculatorConfig
from .state_machine import CalculatorStateMachine, TransitionResult, transition
from .tokens import BACKSPACE, CLEAR, DECIMAL, EQUALS, token_from_key
from .validation import (
    MAX_INPUT_LENGTH,
    can_append_decimal,
    can_compute,
    enforce_max_length,
    is_complete_decimal,
    is_digit,
    is_operator,
)

__all__ = [
    # Session
    "Calculator",
    "CalculatorConfig",
    "ConfirmCallback",
    # State machine
    "CalculatorStateMachine",
    "TransitionResult",
    "transition",
    # Tokens
    "BACKSPACE",
    "CLEAR",
    "DECIMAL",
    "EQUALS",
    "token_from_key",
    # Validation
    "MAX_INPUT_LENGTH",
    "can_append_decimal",
    "can_compute",
    "enforce_max_length",
    "is_complete_decimal",
    "is_digit",
    "is_operator",
]
