"""
CalculatorState - Модель состояния калькулятора

Immutable Pydantic модель: два буфера операндов и ожидающий оператор.
Полная совместимость с JSON Schema (contracts/schema/calculator_state.json):
JSON имена полей inputA / inputB / operator.

ИНВАРИАНТЫ:
1. inputB непустой только если operator установлен
2. Каждый операнд соответствует ^-?\\d*(\\.\\d*)?$ (не более одной точки)
3. Active operand = inputB если operator установлен, иначе inputA
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class Operator(str, Enum):
    """Бинарный оператор калькулятора."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"


class Phase(str, Enum):
    """
    Фаза state machine, производная от полей состояния.

    - IDLE: оператор не выбран
    - OPERATOR_PENDING: оператор выбран, inputB пустой
    - ENTERING_B: оператор выбран, inputB непустой
    """

    IDLE = "IDLE"
    OPERATOR_PENDING = "OPERATOR_PENDING"
    ENTERING_B = "ENTERING_B"


# Операнд: опциональный минус (результат вычисления может быть отрицательным),
# цифры и не более одной десятичной точки
OPERAND_PATTERN = r"^-?\d*(\.\d*)?$"


# =============================================================================
# CALCULATOR STATE MODEL
# =============================================================================


class CalculatorState(BaseModel):
    """
    Снапшот состояния калькулятора.

    Immutable модель (frozen=True). Все мутации выполняются через
    state machine, которая строит новый снапшот (with_active / model_copy).
    """

    input_a: str = Field("", alias="inputA", pattern=OPERAND_PATTERN, description="Первый операнд")
    input_b: str = Field("", alias="inputB", pattern=OPERAND_PATTERN, description="Второй операнд")
    operator: Optional[Operator] = Field(None, description="Ожидающий оператор")

    model_config = {"frozen": True, "populate_by_name": True}

    @model_validator(mode="after")
    def _check_operand_b_requires_operator(self) -> "CalculatorState":
        if self.input_b and self.operator is None:
            raise ValueError("inputB must be empty while no operator is pending")
        return self

    @classmethod
    def empty(cls) -> "CalculatorState":
        """Начальное состояние: Idle, оба операнда пустые."""
        return cls()

    @property
    def phase(self) -> Phase:
        if self.operator is None:
            return Phase.IDLE
        if not self.input_b:
            return Phase.OPERATOR_PENDING
        return Phase.ENTERING_B

    @property
    def active_field(self) -> str:
        """Имя поля активного операнда ("input_a" или "input_b")."""
        return "input_b" if self.operator is not None else "input_a"

    @property
    def active_operand(self) -> str:
        return getattr(self, self.active_field)

    @property
    def display_value(self) -> str:
        """
        Значение для дисплея.

        inputB если оператор выбран и inputB непустой, иначе inputA;
        "0" если оба пустые.
        """
        if self.operator is not None and self.input_b:
            return self.input_b
        return self.input_a or "0"

    def with_active(self, value: str) -> "CalculatorState":
        """Новый снапшот с заменённым активным операндом."""
        return self.model_copy(update={self.active_field: value})

    def to_snapshot(self) -> dict:
        """JSON-совместимый снапшот (inputA / inputB / operator)."""
        return self.model_dump(mode="json", by_alias=True)
