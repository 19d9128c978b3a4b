"""
Contract Validation Module

Модуль для валидации JSON контрактов калькулятора (состояние, audit trail).
"""

from .validators import (
    AuditEntryValidator,
    AuditLogValidator,
    CalculatorStateValidator,
    ContractValidator,
    SchemaLoader,
    validate_audit_entry,
    validate_audit_log,
    validate_calculator_state,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "CalculatorStateValidator",
    "AuditEntryValidator",
    "AuditLogValidator",
    # Functions
    "validate_calculator_state",
    "validate_audit_entry",
    "validate_audit_log",
]
