"""
Audit trail - append-only журнал переходов калькулятора и его хранилище.
"""

from .log import AuditLog
from .storage import (
    AUDIT_LOG_STORAGE_KEY,
    DEVICE_ID_STORAGE_KEY,
    AuditStorage,
    InMemoryStorage,
    JsonFileStorage,
    load_or_create_device_id,
)

__all__ = [
    "AUDIT_LOG_STORAGE_KEY",
    "DEVICE_ID_STORAGE_KEY",
    "AuditLog",
    "AuditStorage",
    "InMemoryStorage",
    "JsonFileStorage",
    "load_or_create_device_id",
]
