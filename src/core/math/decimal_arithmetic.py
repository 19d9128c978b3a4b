"""
Decimal Arithmetic - Arithmetic Engine калькулятора

Модуль вычисляет результат бинарной операции над двумя операндами,
заданными десятичными строками:
- Сложение, вычитание, умножение через масштабирование в целые числа
  (устраняет артефакты binary float: 0.1 + 0.2 = 0.3)
- Деление напрямую во float (точный результат не обязательно конечная дробь)
- Форматирование: не более 10 знаков после точки, без хвостовых нулей

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Невалидный операнд → InvalidNumber
2. Неизвестный оператор → InvalidOperator
3. Деление на ноль → DivideByZero (никогда не возвращается Inf/NaN)
4. Функции чистые и детерминированные

ФОРМУЛЫ:
    p = max(decimals(a), decimals(b)),  scale = 10^p
    A = a * scale,  B = b * scale  (точные целые из строк)
    a + b = (A + B) / scale
    a - b = (A - B) / scale
    a * b = (A * B) / scale^2
    a / b = a / b
"""

import math
import re
from typing import Final

from src.core.domain.calculator_state import Operator
from src.core.errors import DivideByZero, InvalidNumber, InvalidOperator

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Максимум знаков после десятичной точки в результате
DEFAULT_FRACTIONAL_DIGITS: Final[int] = 10

# Число, которое принимает engine: допускается хвостовая точка ("2."),
# ведущая точка (".5") и знак минус у результата предыдущего вычисления
_NUMBER_RE: Final[re.Pattern] = re.compile(r"^-?(\d+\.?\d*|\.\d+)$")


# =============================================================================
# РАЗБОР И ФОРМАТИРОВАНИЕ
# =============================================================================


def parse_operand(text: str) -> float:
    """
    Разбор операнда в конечный float.

    Args:
        text: Десятичная строка

    Returns:
        Значение операнда

    Raises:
        InvalidNumber: Если строка не является конечным десятичным числом

    Examples:
        >>> parse_operand("2.5")
        2.5
        >>> parse_operand("2.")
        2.0
    """
    if not isinstance(text, str) or not _NUMBER_RE.match(text):
        raise InvalidNumber(f"Invalid number: {text!r}")

    value = float(text)
    if not math.isfinite(value):
        raise InvalidNumber(f"Number is not finite: {text!r}")
    return value


def decimal_places(text: str) -> int:
    """
    Количество цифр после десятичной точки в исходной строке.

    Examples:
        >>> decimal_places("12")
        0
        >>> decimal_places("2.5000")
        4
    """
    idx = text.find(".")
    return 0 if idx == -1 else len(text) - idx - 1


def to_scaled(text: str, places: int) -> int:
    """
    Операнд как целое число единиц 10^-places, без промежуточного float.

    Examples:
        >>> to_scaled("2.5", 2)
        250
        >>> to_scaled("-.5", 1)
        -5
    """
    negative = text.startswith("-")
    whole, _, fraction = text.lstrip("-").partition(".")
    if len(fraction) > places:
        raise ValueError(f"{text!r} has more than {places} fractional digits")
    value = int((whole or "0") + fraction.ljust(places, "0"))
    return -value if negative else value


def format_result(value: float, fractional_digits: int = DEFAULT_FRACTIONAL_DIGITS) -> str:
    """
    Форматирование результата.

    Округление до fractional_digits знаков, затем удаление хвостовых нулей
    и висящей десятичной точки. "-0" нормализуется в "0".

    Raises:
        InvalidNumber: Если результат не конечен (переполнение)

    Examples:
        >>> format_result(3.0)
        '3'
        >>> format_result(1 / 3)
        '0.3333333333'
    """
    if not math.isfinite(value):
        raise InvalidNumber(f"Result is not finite: {value}")

    text = f"{value:.{fractional_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def format_scaled(
    numerator: int,
    denominator: int,
    fractional_digits: int = DEFAULT_FRACTIONAL_DIGITS,
) -> str:
    """
    Точное форматирование рационального numerator / denominator.

    Округление half away from zero до fractional_digits знаков, затем
    обрезка хвостовых нулей и точки. Без промежуточного float, поэтому
    целые произведения не теряют младшие разряды.

    Examples:
        >>> format_scaled(3, 10)
        '0.3'
        >>> format_scaled(99999999980000000001, 1)
        '99999999980000000001'
    """
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")

    unit = 10 ** fractional_digits
    quotient, remainder = divmod(abs(numerator) * unit, denominator)
    if 2 * remainder >= denominator:
        quotient += 1

    whole, fraction = divmod(quotient, unit)
    text = str(whole)
    if fractional_digits > 0:
        digits = str(fraction).rjust(fractional_digits, "0").rstrip("0")
        if digits:
            text = f"{text}.{digits}"

    if numerator < 0 and text != "0":
        return f"-{text}"
    return text


# =============================================================================
# ВЫЧИСЛЕНИЕ
# =============================================================================


def compute(
    a_str: str,
    op: str,
    b_str: str,
    fractional_digits: int = DEFAULT_FRACTIONAL_DIGITS,
) -> str:
    """
    Вычисление a op b над десятичными строками.

    Args:
        a_str: Первый операнд
        op: Оператор (+ - * /)
        b_str: Второй операнд
        fractional_digits: Максимум знаков после точки в результате

    Returns:
        Результат как десятичная строка

    Raises:
        InvalidNumber: Если операнд не является конечным числом
        InvalidOperator: Если оператор не поддерживается
        DivideByZero: Если op == "/" и b == 0

    Examples:
        >>> compute("0.1", "+", "0.2")
        '0.3'
        >>> compute("2.5000", "+", "0.5000")
        '3'
    """
    a = parse_operand(a_str)
    b = parse_operand(b_str)

    try:
        operator = Operator(op)
    except ValueError:
        raise InvalidOperator(f"Invalid operator: {op!r}") from None

    if operator == Operator.DIVIDE:
        if b == 0:
            raise DivideByZero("Divide by zero")
        return format_result(a / b, fractional_digits)

    places = max(decimal_places(a_str), decimal_places(b_str))
    scale = 10 ** places
    a_scaled = to_scaled(a_str, places)
    b_scaled = to_scaled(b_str, places)

    if operator == Operator.ADD:
        return format_scaled(a_scaled + b_scaled, scale, fractional_digits)
    if operator == Operator.SUBTRACT:
        return format_scaled(a_scaled - b_scaled, scale, fractional_digits)
    # Оба операнда масштабированы: делим на scale^2
    return format_scaled(a_scaled * b_scaled, scale * scale, fractional_digits)
