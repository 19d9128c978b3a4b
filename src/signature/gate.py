"""Signature Gate - подтверждение state-mutating действий электронной подписью.

Gate перехватывает '=' и 'C': действие откладывается в PendingConfirmation,
пока вызывающий код не передаст PIN или не отменит подтверждение.
- PIN верный → действие применяется, audit запись несёт SignatureResult
- PIN неверный → действие отбрасывается, аудируется ERROR
- Отмена → действие отбрасывается без audit записи

Ожидание не ограничено по времени: состояние ожидания сохраняется
до verify() или cancel().
"""

import hmac
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from src.core.domain.audit_entry import SignatureResult
from src.core.domain.calculator_state import CalculatorState

logger = logging.getLogger(__name__)


class PendingAction(str, Enum):
    """Действие, ожидающее подписи."""
    CLEAR = "C"
    COMPUTE = "="


class IdentityProvider(Protocol):
    """Внешний identity collaborator (активная сессия)."""

    display_name: str

    def get_subject_id(self) -> str:
        ...

    def verify_pin(self, pin: str) -> bool:
        ...


@dataclass(frozen=True)
class StaticIdentity:
    """Identity с фиксированным subjectId и ожидаемым PIN."""

    subject_id: str
    pin: str
    display_name: str = ""

    def get_subject_id(self) -> str:
        return self.subject_id

    def verify_pin(self, pin: str) -> bool:
        return hmac.compare_digest(str(pin).encode("utf-8"), self.pin.encode("utf-8"))


@dataclass(frozen=True)
class PendingConfirmation:
    """Отложенное действие и состояние на момент запроса."""

    action: PendingAction
    requested_state: CalculatorState


class SignatureGate:
    """Signature Gate для '=' и 'C'.

    Один pending запрос за раз: повторный request() при ожидании
    возвращает уже существующий запрос.
    """

    def __init__(self, identity: IdentityProvider, method: str = "pin"):
        self.identity = identity
        self.method = method
        self._pending: Optional[PendingConfirmation] = None

    @property
    def pending(self) -> Optional[PendingConfirmation]:
        return self._pending

    def request(self, action: PendingAction, state: CalculatorState) -> PendingConfirmation:
        """Перевод в PendingConfirmation."""
        if self._pending is not None:
            return self._pending
        self._pending = PendingConfirmation(action=action, requested_state=state)
        logger.debug("Signature requested for %s", action.name)
        return self._pending

    def verify(self, pin: str) -> tuple[PendingConfirmation, SignatureResult]:
        """Проверка PIN и снятие ожидания.

        Returns:
            (отложенное действие, результат подписи)

        Raises:
            RuntimeError: Если нет ожидающего подтверждения
        """
        if self._pending is None:
            raise RuntimeError("No action is awaiting a signature")

        pending, self._pending = self._pending, None
        result = SignatureResult(verified=self.identity.verify_pin(pin), method=self.method)
        if not result.verified:
            logger.warning(
                "Signature rejected for %s by %s",
                pending.action.name,
                self.identity.get_subject_id(),
            )
        return pending, result

    def cancel(self) -> Optional[PendingConfirmation]:
        """Отмена ожидания; возвращает отменённый запрос (или None)."""
        pending, self._pending = self._pending, None
        if pending is not None:
            logger.debug("Signature request for %s cancelled", pending.action.name)
        return pending
