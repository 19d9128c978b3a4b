"""Calculator - сессия калькулятора поверх чистой state machine.

Сессия владеет текущим CalculatorState, сообщением об ошибке для дисплея
и audit log. Collaborators передаются явно:
- confirm(prompt) -> bool: подтверждение очистки (режим без подписи)
- SignatureGate: подпись для '=' и 'C' (вместо confirm)
- identity (через gate): subjectId для audit записей

Каждый применённый или завершившийся ошибкой переход порождает ровно
одну audit запись; тихие no-op переходы не аудируются.
"""

import logging
from typing import Callable, Iterable, Optional

from src.audit.log import AuditLog
from src.audit.storage import AuditStorage
from src.calculator.config import CalculatorConfig
from src.calculator.state_machine import CalculatorStateMachine, TransitionResult
from src.calculator.tokens import CLEAR, EQUALS
from src.calculator.validation import can_compute
from src.core.domain.audit_entry import AuditAction, SignatureResult
from src.core.domain.calculator_state import CalculatorState
from src.core.errors import InvalidSignature, to_user_message
from src.signature.gate import PendingAction, PendingConfirmation, SignatureGate

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


class Calculator:
    """Калькулятор с валидацией ввода, audit trail и опциональной подписью.
    
    Args:
        config: конфигурация (лимиты, слоты хранилища)
        audit_log: audit trail; по умолчанию лог в storage, subjectId
            берётся из identity gate или из идентификатора установки
        confirm: подтверждение очистки, если gate не задан
        signature_gate: gate для '=' и 'C'
        storage: хранилище слотов для audit log по умолчанию
    """
    
    def __init__(
        self,
        config: Optional[CalculatorConfig] = None,
        audit_log: Optional[AuditLog] = None,
        confirm: Optional[ConfirmCallback] = None,
        signature_gate: Optional[SignatureGate] = None,
        storage: Optional[AuditStorage] = None,
    ):
        self.config = config or CalculatorConfig()
        self.state_machine = CalculatorStateMachine(self.config)
        self.signature_gate = signature_gate
        self._confirm = confirm
        
        if audit_log is None:
            audit_log = AuditLog(
                storage=storage,
                storage_key=self.config.audit_storage_key,
                device_id_key=self.config.device_id_storage_key,
                subject_id_provider=(
                    signature_gate.identity.get_subject_id if signature_gate is not None else None
                ),
            )
        self.audit_log = audit_log
        
        self._state = CalculatorState.empty()
        self._error = ""
        # inputA держит результат последнего COMPUTE: новый ввод начинает операнд заново
        self._result_shown = False
    
    @property
    def state(self) -> CalculatorState:
        return self._state
    
    @property
    def display(self) -> str:
        return self._state.display_value
    
    @property
    def error(self) -> str:
        """Сообщение об ошибке для дисплея ("" если ошибки нет)."""
        return self._error
    
    @property
    def pending(self) -> Optional[PendingConfirmation]:
        if self.signature_gate is None:
            return None
        return self.signature_gate.pending
    
    def press(self, token: str) -> TransitionResult:
        """Обработка одного токена до конца."""
        state = self._state
        
        if self.pending is not None:
            logger.warning(
                "Token %r ignored: %s is awaiting a signature", token, self.pending.action.name
            )
            return TransitionResult.unchanged(state, "confirmation_pending")
        
        if token == CLEAR:
            if self.signature_gate is not None:
                self.signature_gate.request(PendingAction.CLEAR, state)
                return TransitionResult.unchanged(state, "awaiting_signature")
            if self._confirm is not None and not self._confirm(self.config.clear_prompt):
                return TransitionResult.unchanged(state, "clear_declined")
        
        if token == EQUALS and self.signature_gate is not None and can_compute(state):
            self.signature_gate.request(PendingAction.COMPUTE, state)
            return TransitionResult.unchanged(state, "awaiting_signature")
        
        result = self.state_machine.evaluate_transition(state, token, self._result_shown)
        self._commit(result)
        return result
    
    def press_all(self, tokens: Iterable[str]) -> list[TransitionResult]:
        return [self.press(token) for token in tokens]
    
    def submit_pin(self, pin: str) -> SignatureResult:
        """Подпись отложенного действия.
        
        Raises:
            RuntimeError: если gate не задан или нет ожидающего действия
        """
        if self.signature_gate is None:
            raise RuntimeError("Signature gating is not enabled")
        
        pending, signature = self.signature_gate.verify(pin)
        
        if not signature.verified:
            error = InvalidSignature(f"Signature rejected for {pending.action.name}")
            self.audit_log.audit_error(
                self._state,
                None,
                error,
                signature=signature,
                requested_action=pending.action.name,
            )
            self._error = to_user_message(error)
            return signature
        
        result = self.state_machine.evaluate_transition(self._state, pending.action.value)
        self._commit(result, signature)
        return signature
    
    def cancel_confirmation(self) -> None:
        """Отмена ожидающей подписи: без audit записи и изменения состояния."""
        if self.signature_gate is not None:
            self.signature_gate.cancel()
    
    def _commit(self, result: TransitionResult, signature: Optional[SignatureResult] = None) -> None:
        """Аудит результата и применение нового состояния."""
        if result.action is None:
            return
        
        before = result.previous_state
        after = result.new_state
        log = self.audit_log
        
        if result.action == AuditAction.ERROR:
            log.audit_error(before, after, result.error, signature=signature)
            self._error = result.error_message or ""
            logger.info("Transition %s failed: %s", result.transition_reason, result.error)
            return
        
        if result.action == AuditAction.INPUT:
            log.audit_digit(before, after, **result.metadata)
        elif result.action == AuditAction.OPERATOR:
            log.audit_operator(before, after, **result.metadata)
        elif result.action == AuditAction.COMPUTE:
            log.audit_compute(before, after, signature=signature, **result.metadata)
            logger.info("Computed %s", after.input_a)
        elif result.action == AuditAction.CLEAR:
            log.audit_clear(before, after, signature=signature)
            logger.info("Calculator cleared")
        
        self._state = after
        self._error = ""
        self._result_shown = result.action == AuditAction.COMPUTE
        logger.debug("Transition %s applied", result.transition_reason)
