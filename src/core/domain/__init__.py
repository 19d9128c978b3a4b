"""
Domain models and value objects.

Contains the calculator state snapshot and the audit trail records.
"""

from src.core.domain.audit_entry import AuditAction, AuditEntry, SignatureResult
from src.core.domain.calculator_state import (
    OPERAND_PATTERN,
    CalculatorState,
    Operator,
    Phase,
)

__all__ = [
    # Calculator state
    "OPERAND_PATTERN",
    "CalculatorState",
    "Operator",
    "Phase",
    # Audit trail
    "AuditAction",
    "AuditEntry",
    "SignatureResult",
]
