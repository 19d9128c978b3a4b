"""
Audit Log - append-only audit trail калькулятора

AuditLog - единственный writer упорядоченной последовательности AuditEntry:
- append() присваивает timestamp и subjectId и добавляет запись в конец
- get_all() возвращает копию (oldest first), изменение копии не влияет на лог
- clear() стирает всё (только тесты / административный сброс)
- export_json() сериализует лог, import_json() разбирает экспорт обратно

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Записи не изменяются и не удаляются по одной
2. Ошибки хранилища не блокируют калькулятор (логируются и глушатся)
3. Экспорт соответствует контракту audit_log.json
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

from jsonschema import ValidationError as SchemaValidationError

from src.audit.storage import (
    AUDIT_LOG_STORAGE_KEY,
    DEVICE_ID_STORAGE_KEY,
    AuditStorage,
    InMemoryStorage,
    load_or_create_device_id,
)
from src.core.contracts.validators import validate_audit_log
from src.core.domain.audit_entry import AuditAction, AuditEntry, SignatureResult
from src.core.domain.calculator_state import CalculatorState
from src.core.errors import CalculatorError

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditLog:
    """
    Append-only audit trail с персистентностью в слоте хранилища.

    Args:
        storage: Хранилище слотов (default: InMemoryStorage)
        storage_key: Слот audit trail
        subject_id_provider: Источник subjectId (активная сессия); если None,
            используется стабильный идентификатор установки
        device_id_key: Слот идентификатора установки
        clock: Источник времени (default: UTC now)
    """

    def __init__(
        self,
        storage: Optional[AuditStorage] = None,
        storage_key: str = AUDIT_LOG_STORAGE_KEY,
        subject_id_provider: Optional[Callable[[], str]] = None,
        device_id_key: str = DEVICE_ID_STORAGE_KEY,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if storage_key == device_id_key:
            raise ValueError("Audit log slot must differ from the device id slot")

        self._storage = storage if storage is not None else InMemoryStorage()
        self._storage_key = storage_key
        self._device_id_key = device_id_key
        self._subject_id_provider = subject_id_provider
        self._clock = clock or _utc_now
        self._device_id: Optional[str] = None

        self._entries: list[AuditEntry] = self._load()

    def __len__(self) -> int:
        return len(self._entries)

    # =========================================================================
    # CORE OPERATIONS
    # =========================================================================

    def subject_id(self) -> str:
        """subjectId для новой записи."""
        if self._subject_id_provider is not None:
            return self._subject_id_provider()
        if self._device_id is None:
            self._device_id = load_or_create_device_id(self._storage, self._device_id_key)
        return self._device_id

    def append(
        self,
        action: AuditAction,
        before: CalculatorState,
        after: Optional[CalculatorState] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Добавление записи в конец лога.

        Timestamp (момент вызова) и subjectId присваиваются здесь.
        Ошибка записи в хранилище логируется, запись остаётся в памяти.
        """
        entry = AuditEntry(
            subject_id=self.subject_id(),
            timestamp=self._clock().isoformat(),
            action=action,
            before=before,
            after=after,
            metadata=metadata or {},
        )
        self._entries.append(entry)
        self._persist()
        logger.debug("Audit %s recorded (%d entries)", action.value, len(self._entries))

    def get_all(self) -> list[AuditEntry]:
        """Все записи (oldest first), независимая копия."""
        return [entry.model_copy(deep=True) for entry in self._entries]

    def clear(self) -> None:
        """Стирание всего лога (тесты / административный сброс)."""
        self._entries = []
        try:
            self._storage.remove(self._storage_key)
        except OSError as e:
            logger.warning("Failed to remove audit slot %s: %s", self._storage_key, e)

    def export_json(self, indent: Optional[int] = None) -> str:
        """Сериализация лога в JSON массив записей."""
        return json.dumps([entry.to_record() for entry in self._entries], indent=indent)

    @staticmethod
    def import_json(text: str) -> list[AuditEntry]:
        """
        Разбор экспорта обратно в записи.

        Raises:
            json.JSONDecodeError: Если text не является JSON
            jsonschema.ValidationError: Если данные не соответствуют audit_log.json
            pydantic.ValidationError: Если запись не проходит модель AuditEntry
        """
        records = json.loads(text)
        validate_audit_log(records)
        return [AuditEntry.model_validate(record) for record in records]

    # =========================================================================
    # SHAPING HELPERS
    # =========================================================================

    def audit_digit(
        self,
        before: CalculatorState,
        after: CalculatorState,
        reason: str = "digit",
        **metadata: Any,
    ) -> None:
        """INPUT запись (digit / decimal / backspace)."""
        self.append(AuditAction.INPUT, before, after, {"reason": reason, **metadata})

    def audit_operator(
        self,
        before: CalculatorState,
        after: CalculatorState,
        **metadata: Any,
    ) -> None:
        """OPERATOR запись."""
        self.append(AuditAction.OPERATOR, before, after, metadata)

    def audit_compute(
        self,
        before: CalculatorState,
        after: CalculatorState,
        signature: Optional[SignatureResult] = None,
        **metadata: Any,
    ) -> None:
        """COMPUTE запись."""
        self.append(AuditAction.COMPUTE, before, after, _with_signature(metadata, signature))

    def audit_clear(
        self,
        before: CalculatorState,
        after: CalculatorState,
        signature: Optional[SignatureResult] = None,
        **metadata: Any,
    ) -> None:
        """CLEAR запись."""
        self.append(AuditAction.CLEAR, before, after, _with_signature(metadata, signature))

    def audit_error(
        self,
        before: CalculatorState,
        after: Optional[CalculatorState],
        error: Union[CalculatorError, str],
        signature: Optional[SignatureResult] = None,
        **metadata: Any,
    ) -> None:
        """ERROR запись: код ошибки и описание."""
        if isinstance(error, CalculatorError):
            metadata = {"error": error.code, "message": str(error), **metadata}
        else:
            metadata = {"error": "ERROR", "message": str(error), **metadata}
        self.append(AuditAction.ERROR, before, after, _with_signature(metadata, signature))

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def _load(self) -> list[AuditEntry]:
        try:
            raw = self._storage.get(self._storage_key)
        except OSError as e:
            logger.warning("Failed to read audit slot %s: %s", self._storage_key, e)
            return []

        if not raw:
            return []

        try:
            return self.import_json(raw)
        except (ValueError, SchemaValidationError) as e:
            logger.warning("Audit slot %s is corrupt, starting empty: %s", self._storage_key, e)
            return []

    def _persist(self) -> None:
        try:
            self._storage.set(self._storage_key, self.export_json())
        except OSError as e:
            logger.warning("Failed to persist audit log to slot %s: %s", self._storage_key, e)


def _with_signature(
    metadata: dict[str, Any],
    signature: Optional[SignatureResult],
) -> dict[str, Any]:
    if signature is None:
        return metadata
    return {**metadata, "signature": signature.model_dump()}
