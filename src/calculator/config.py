"""Конфигурация калькулятора."""

from dataclasses import dataclass

from src.audit.storage import AUDIT_LOG_STORAGE_KEY, DEVICE_ID_STORAGE_KEY
from src.calculator.validation import MAX_INPUT_LENGTH
from src.core.math.decimal_arithmetic import DEFAULT_FRACTIONAL_DIGITS


@dataclass(frozen=True)
class CalculatorConfig:
    """
    Конфигурация калькулятора.

    - max_length: лимит длины операнда при вводе
    - fractional_digits: максимум знаков после точки в результате
    - audit_storage_key: слот хранилища для audit trail
    - device_id_storage_key: слот хранилища для идентификатора установки
    - clear_prompt: текст подтверждения очистки (режим без подписи)
    """
    max_length: int = MAX_INPUT_LENGTH
    fractional_digits: int = DEFAULT_FRACTIONAL_DIGITS
    audit_storage_key: str = AUDIT_LOG_STORAGE_KEY
    device_id_storage_key: str = DEVICE_ID_STORAGE_KEY
    clear_prompt: str = "Clear all?"

    def __post_init__(self):
        if self.max_length < 1:
            raise ValueError(f"max_length must be positive, got {self.max_length}")
        if self.fractional_digits < 0:
            raise ValueError(
                f"fractional_digits must be non-negative, got {self.fractional_digits}"
            )
        if self.audit_storage_key == self.device_id_storage_key:
            raise ValueError("audit_storage_key must differ from device_id_storage_key")
