"""
Input tokens калькулятора и отображение клавиш в токены.

Токены: '0'-'9', '+', '-', '*', '/', '.', '=', 'C' (clear), 'BS' (backspace).
Нераспознанные токены игнорируются state machine.
"""

from typing import Final, Optional

from src.calculator.validation import is_digit, is_operator

DECIMAL: Final[str] = "."
EQUALS: Final[str] = "="
CLEAR: Final[str] = "C"
BACKSPACE: Final[str] = "BS"

_KEY_ALIASES: Final[dict[str, str]] = {
    "Enter": EQUALS,
    "=": EQUALS,
    ".": DECIMAL,
    "Backspace": BACKSPACE,
    "Escape": CLEAR,
    "c": CLEAR,
    "C": CLEAR,
}


def token_from_key(key: str) -> Optional[str]:
    """
    Преобразование имени клавиши клавиатуры в токен.

    Returns:
        Токен или None если клавиша не используется калькулятором

    Examples:
        >>> token_from_key("Enter")
        '='
        >>> token_from_key("x") is None
        True
    """
    if is_digit(key) or is_operator(key):
        return key
    return _KEY_ALIASES.get(key)
