"""
AuditEntry - Модель записи audit trail

Immutable Pydantic модель записи о попытке перехода state machine
(успешной или завершившейся ошибкой).
Полная совместимость с JSON Schema (contracts/schema/audit_entry.json).

Записи создаются только AuditLog (единственный writer) и никогда
не изменяются после добавления.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .calculator_state import CalculatorState


# =============================================================================
# ENUMS
# =============================================================================


class AuditAction(str, Enum):
    """Тип действия в audit trail."""

    COMPUTE = "COMPUTE"
    CLEAR = "CLEAR"
    ERROR = "ERROR"
    INPUT = "INPUT"
    OPERATOR = "OPERATOR"


# =============================================================================
# NESTED MODELS
# =============================================================================


class SignatureResult(BaseModel):
    """
    Результат одной попытки электронной подписи.

    Не сохраняется отдельно: живёт только внутри metadata audit записи.
    """

    verified: bool = Field(..., description="PIN подтверждён")
    method: str = Field("pin", min_length=1, description="Метод подписи")

    model_config = {"frozen": True}


# =============================================================================
# AUDIT ENTRY MODEL
# =============================================================================


class AuditEntry(BaseModel):
    """
    Запись audit trail.

    before - снапшот до перехода, after - снапшот после перехода
    (None если действие не было применено, например отклонённая подпись).
    """

    subject_id: str = Field(..., alias="subjectId", min_length=1, description="Идентификатор субъекта")
    timestamp: str = Field(..., description="Время записи (ISO-8601)")
    action: AuditAction = Field(..., description="Тип действия")
    before: CalculatorState = Field(..., description="Состояние до перехода")
    after: Optional[CalculatorState] = Field(None, description="Состояние после перехода")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Дополнительные данные")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("timestamp")
    @classmethod
    def _check_iso_timestamp(cls, value: str) -> str:
        try:
            datetime.fromisoformat(value)
        except ValueError as e:
            raise ValueError(f"timestamp must be ISO-8601, got {value!r}") from e
        return value

    def to_record(self) -> dict[str, Any]:
        """JSON-совместимое представление (camelCase имена полей)."""
        return self.model_dump(mode="json", by_alias=True)
