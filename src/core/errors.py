"""
Calculator Errors - иерархия ошибок калькулятора

Ошибки Arithmetic Engine (InvalidNumber, InvalidOperator, DivideByZero) и
Signature Gate (InvalidSignature). Отклонения валидации (второй decimal point,
лишний символ сверх лимита) ошибками НЕ являются: это тихие no-op переходы.

Ошибки никогда не выходят за границу state machine: они превращаются в
сообщение на дисплее и ERROR запись в audit log.
"""

from typing import Final


class CalculatorError(Exception):
    """Базовая ошибка калькулятора."""

    code: str = "CALCULATOR_ERROR"


class InvalidNumber(CalculatorError):
    """Операнд не является конечным десятичным числом."""

    code = "INVALID_NUMBER"


class InvalidOperator(CalculatorError):
    """Оператор не входит в набор + - * /."""

    code = "INVALID_OPERATOR"


class DivideByZero(CalculatorError):
    """Деление на ноль."""

    code = "DIVIDE_BY_ZERO"


class InvalidSignature(CalculatorError):
    """PIN не прошёл проверку в Signature Gate."""

    code = "INVALID_SIGNATURE"


# =============================================================================
# USER MESSAGES
# =============================================================================

GENERIC_ERROR_MESSAGE: Final[str] = "Error"

_USER_MESSAGES: Final[dict[type, str]] = {
    DivideByZero: "Cannot divide by zero",
    InvalidNumber: "Invalid number",
    InvalidOperator: "Invalid operator",
    InvalidSignature: "Signature verification failed",
}


def to_user_message(error: BaseException) -> str:
    """
    Преобразование ошибки в сообщение для дисплея.

    Args:
        error: Перехваченная ошибка

    Returns:
        Короткое сообщение для пользователя; для неизвестных ошибок "Error"
    """
    for error_type, message in _USER_MESSAGES.items():
        if isinstance(error, error_type):
            return message
    return GENERIC_ERROR_MESSAGE
