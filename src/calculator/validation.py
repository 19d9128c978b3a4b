"""
Input Validation - предикаты допуска токенов

Чистые функции без состояния: решают, может ли токен изменить текущее
состояние калькулятора. Отказ валидации не является ошибкой: state machine
трактует его как тихий no-op (без сообщения и без audit записи).
"""

import re
from typing import Final

from src.core.domain.calculator_state import CalculatorState, Operator

# Максимальная длина операнда при вводе
MAX_INPUT_LENGTH: Final[int] = 16

DIGITS: Final[str] = "0123456789"

OPERATORS: Final[frozenset[str]] = frozenset(op.value for op in Operator)

# Завершённое десятичное число: без висящей точки ("2." не проходит)
_COMPLETE_DECIMAL_RE: Final[re.Pattern] = re.compile(r"^-?\d+(\.\d+)?$")


def is_digit(token: object) -> bool:
    """True если token - ровно один символ 0-9."""
    return isinstance(token, str) and len(token) == 1 and token in DIGITS


def is_operator(token: object) -> bool:
    """True если token - один из + - * /."""
    return isinstance(token, str) and token in OPERATORS


def can_append_decimal(state: CalculatorState) -> bool:
    """
    Можно ли добавить десятичную точку в active operand.

    Учитывается только active operand: точка в неактивном операнде
    не мешает.
    """
    return "." not in state.active_operand


def enforce_max_length(text: str, max_length: int = MAX_INPUT_LENGTH) -> str:
    """
    Ограничение длины строки слева направо.

    Сохраняются первые max_length символов, всё новое сверх лимита
    отбрасывается.

    Raises:
        ValueError: Если max_length < 1

    Examples:
        >>> enforce_max_length("12345678901234567", 16)
        '1234567890123456'
    """
    if max_length < 1:
        raise ValueError(f"max_length must be positive, got {max_length}")
    return text[:max_length]


def is_complete_decimal(text: str) -> bool:
    """True если text - непустое число без висящей десятичной точки."""
    return bool(_COMPLETE_DECIMAL_RE.match(text))


def can_compute(state: CalculatorState) -> bool:
    """
    Готово ли состояние к вычислению.

    Оба операнда - завершённые десятичные числа, оператор выбран.
    """
    return (
        state.operator is not None
        and is_complete_decimal(state.input_a)
        and is_complete_decimal(state.input_b)
    )
