"""
Core math modules для калькулятора

Arithmetic Engine: масштабированная десятичная арифметика над строками.
"""

from src.core.math.decimal_arithmetic import (
    DEFAULT_FRACTIONAL_DIGITS,
    compute,
    decimal_places,
    format_result,
    format_scaled,
    parse_operand,
    to_scaled,
)

__all__ = [
    "DEFAULT_FRACTIONAL_DIGITS",
    "compute",
    "decimal_places",
    "format_result",
    "format_scaled",
    "parse_operand",
    "to_scaled",
]
