"""
Audit Storage - именованные слоты хранилища

Audit trail хранится в одном слоте (JSON массив записей), идентификатор
установки - в отдельном слоте. Хранилище знает только строки: формат
содержимого определяет AuditLog.

Реализации:
- InMemoryStorage: dict в памяти (default, тесты)
- JsonFileStorage: один файл <key>.json на слот, атомарная запись
"""

import json
import logging
import os
import re
import tempfile
import uuid
from pathlib import Path
from typing import Final, Optional, Protocol

logger = logging.getLogger(__name__)

# Слот audit trail
AUDIT_LOG_STORAGE_KEY: Final[str] = "calculator_audit_log_v1"

# Слот идентификатора установки (subjectId без аутентифицированной сессии)
DEVICE_ID_STORAGE_KEY: Final[str] = "calculator_device_id_v1"

_KEY_RE: Final[re.Pattern] = re.compile(r"^[A-Za-z0-9_.-]+$")


class AuditStorage(Protocol):
    """Хранилище именованных строковых слотов."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class InMemoryStorage:
    """Слоты в памяти процесса."""

    def __init__(self):
        self._slots: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value

    def remove(self, key: str) -> None:
        self._slots.pop(key, None)


class JsonFileStorage:
    """
    Слоты в каталоге на диске: <directory>/<key>.json.

    Запись через временный файл и os.replace: читатель никогда
    не видит частично записанный слот.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


# =============================================================================
# DEVICE IDENTIFIER
# =============================================================================


def new_device_id() -> str:
    return f"device-{uuid.uuid4().hex}"


def load_or_create_device_id(
    storage: AuditStorage,
    key: str = DEVICE_ID_STORAGE_KEY,
) -> str:
    """
    Стабильный идентификатор установки.

    Читает идентификатор из слота; если слот пуст или повреждён,
    создаёт новый и сохраняет его. Ошибки хранилища не пробрасываются:
    в худшем случае идентификатор живёт только в этом процессе.

    Args:
        storage: Хранилище слотов
        key: Слот идентификатора

    Returns:
        Идентификатор вида "device-<hex>"
    """
    try:
        raw = storage.get(key)
    except OSError as e:
        logger.warning("Failed to read device id slot %s: %s", key, e)
        raw = None

    if raw:
        try:
            value = json.loads(raw)
        except ValueError:
            value = None
        if isinstance(value, str) and value:
            return value
        logger.warning("Device id slot %s is corrupt, generating a new id", key)

    device_id = new_device_id()
    try:
        storage.set(key, json.dumps(device_id))
    except OSError as e:
        logger.warning("Failed to persist device id to slot %s: %s", key, e)
    return device_id
