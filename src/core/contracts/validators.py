"""
JSON Schema Contract Validators

Модуль для валидации JSON представлений калькулятора согласно формальным
JSON Schema контрактам. Использует библиотеку jsonschema для проверки
соответствия данных схемам.

Схемы (src/core/contracts/schema/):
- calculator_state.json (снапшот inputA / inputB / operator)
- audit_entry.json (одна запись audit trail)
- audit_log.json (экспорт audit trail целиком)
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    По умолчанию читает схемы из каталога schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'audit_entry')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            json.JSONDecodeError: Если файл не является валидным JSON
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Any) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Any) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Any):
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


class CalculatorStateValidator(ContractValidator):
    """Валидатор для calculator_state контракта."""

    def __init__(self):
        super().__init__("calculator_state")


class AuditEntryValidator(ContractValidator):
    """Валидатор для audit_entry контракта."""

    def __init__(self):
        super().__init__("audit_entry")


class AuditLogValidator(ContractValidator):
    """Валидатор для audit_log контракта (экспорт целиком)."""

    def __init__(self):
        super().__init__("audit_log")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_calculator_state(data: Dict[str, Any]) -> None:
    """
    Валидация calculator_state данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    CalculatorStateValidator().validate(data)


def validate_audit_entry(data: Dict[str, Any]) -> None:
    """
    Валидация одной audit записи.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    AuditEntryValidator().validate(data)


def validate_audit_log(data: list) -> None:
    """
    Валидация экспортированного audit trail.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    AuditLogValidator().validate(data)


__all__ = [
    "SchemaLoader",
    "ContractValidator",
    "CalculatorStateValidator",
    "AuditEntryValidator",
    "AuditLogValidator",
    "ValidationError",
    "validate_calculator_state",
    "validate_audit_entry",
    "validate_audit_log",
]
