"""Calculator State Machine - переходы состояния по input токенам.

Фазы (производные от CalculatorState):
- IDLE: оператор не выбран, вводится inputA
- OPERATOR_PENDING: оператор выбран, inputB пустой
- ENTERING_B: оператор выбран, вводится inputB

Переходы чистые: (state, token) → TransitionResult. Результат несёт
новое состояние, тип audit записи (или None для тихого no-op) и ошибку
Arithmetic Engine, если она была. Ошибки не выбрасываются наружу.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from src.calculator.config import CalculatorConfig
from src.calculator.tokens import BACKSPACE, CLEAR, DECIMAL, EQUALS
from src.calculator.validation import (
    can_append_decimal,
    can_compute,
    enforce_max_length,
    is_digit,
    is_operator,
)
from src.core.domain.audit_entry import AuditAction
from src.core.domain.calculator_state import CalculatorState, Operator
from src.core.errors import CalculatorError, to_user_message
from src.core.math.decimal_arithmetic import compute


@dataclass(frozen=True)
class TransitionResult:
    """Результат перехода состояния калькулятора."""
    
    new_state: CalculatorState
    previous_state: CalculatorState
    
    # None → переход не аудируется (тихий no-op)
    action: Optional[AuditAction]
    transition_reason: str
    
    error: Optional[CalculatorError] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    
    @property
    def accepted(self) -> bool:
        """Переход применён без ошибки."""
        return self.action is not None and self.error is None
    
    @property
    def error_message(self) -> Optional[str]:
        return to_user_message(self.error) if self.error is not None else None
    
    @classmethod
    def unchanged(cls, state: CalculatorState, reason: str) -> "TransitionResult":
        """No-op переход: состояние не меняется, audit записи нет."""
        return cls(new_state=state, previous_state=state, action=None, transition_reason=reason)


class CalculatorStateMachine:
    """Calculator State Machine без собственного состояния.
    
    Dispatch токенов:
    - '0'-'9' → digit в active operand
    - '.' → decimal point в active operand
    - '+ - * /' → выбор оператора (с chaining)
    - 'BS' → удаление последнего символа active operand
    - 'C' → сброс в IDLE
    - '=' → вычисление
    - прочее → игнорируется
    """
    
    def __init__(self, config: Optional[CalculatorConfig] = None):
        self.config = config or CalculatorConfig()
    
    def evaluate_transition(
        self,
        state: CalculatorState,
        token: str,
        replace_operand: bool = False,
    ) -> TransitionResult:
        """Вычисление перехода для одного токена.
        
        Args:
            state: текущее состояние
            token: input токен
            replace_operand: digit и decimal point начинают active operand
                заново (на дисплее результат предыдущего вычисления)
        
        Returns:
            TransitionResult с новым состоянием и типом audit записи
        """
        if is_digit(token):
            return self.apply_digit(state, token, replace_operand)
        if token == DECIMAL:
            return self.apply_decimal(state, replace_operand)
        if is_operator(token):
            return self.apply_operator(state, token)
        if token == BACKSPACE:
            return self.apply_backspace(state)
        if token == CLEAR:
            return self.apply_clear(state)
        if token == EQUALS:
            return self.apply_equals(state)
        return self._unchanged(state, "unrecognized_token")
    
    def apply_digit(
        self,
        state: CalculatorState,
        digit: str,
        replace_operand: bool = False,
    ) -> TransitionResult:
        """Digit: добавление в active operand ("0" заменяется цифрой)."""
        if not is_digit(digit):
            return self._unchanged(state, "invalid_digit")
        
        current = "" if replace_operand else state.active_operand
        candidate = digit if current == "0" else current + digit
        if candidate == state.active_operand and not replace_operand:
            return self._unchanged(state, "operand_unchanged")
        if enforce_max_length(candidate, self.config.max_length) != candidate:
            return self._unchanged(state, "max_length_reached")
        
        return self._create_result(
            new_state=state.with_active(candidate),
            previous_state=state,
            action=AuditAction.INPUT,
            transition_reason="digit",
            metadata={"reason": "digit"},
        )
    
    def apply_decimal(
        self,
        state: CalculatorState,
        replace_operand: bool = False,
    ) -> TransitionResult:
        """Decimal point: пустой операнд превращается в "0."."""
        if not replace_operand and not can_append_decimal(state):
            return self._unchanged(state, "decimal_already_present")
        
        current = "" if replace_operand else state.active_operand
        candidate = "0." if current == "" else current + "."
        if enforce_max_length(candidate, self.config.max_length) != candidate:
            return self._unchanged(state, "max_length_reached")
        
        return self._create_result(
            new_state=state.with_active(candidate),
            previous_state=state,
            action=AuditAction.INPUT,
            transition_reason="decimal",
            metadata={"reason": "decimal"},
        )
    
    def apply_operator(self, state: CalculatorState, op: str) -> TransitionResult:
        """Operator: установка или chaining.
        
        Если оператор уже выбран и inputB непустой, сначала вычисляется
        промежуточный результат, он становится inputA. Пустой inputA
        считается нулём. При ошибке engine состояние не меняется, результат
        несёт ERROR.
        """
        if not is_operator(op):
            return self._unchanged(state, "invalid_operator")
        
        operator = Operator(op)
        
        if state.operator is not None and state.input_b:
            try:
                chained = compute(
                    state.input_a or "0",
                    state.operator.value,
                    state.input_b,
                    self.config.fractional_digits,
                )
            except CalculatorError as e:
                return self._error_result(state, e, "chain_failed")
            
            return self._create_result(
                new_state=CalculatorState(input_a=chained, input_b="", operator=operator),
                previous_state=state,
                action=AuditAction.OPERATOR,
                transition_reason="operator_chained",
                metadata={"operator": operator.value, "chained_result": chained},
            )
        
        return self._create_result(
            new_state=state.model_copy(update={"operator": operator}),
            previous_state=state,
            action=AuditAction.OPERATOR,
            transition_reason="operator_set",
            metadata={"operator": operator.value},
        )
    
    def apply_backspace(self, state: CalculatorState) -> TransitionResult:
        """Backspace: удаление последнего символа active operand."""
        current = state.active_operand
        if not current:
            return self._unchanged(state, "operand_empty")
        
        return self._create_result(
            new_state=state.with_active(current[:-1]),
            previous_state=state,
            action=AuditAction.INPUT,
            transition_reason="backspace",
            metadata={"reason": "backspace"},
        )
    
    def apply_clear(self, state: CalculatorState) -> TransitionResult:
        """Clear: сброс всех полей (подтверждение выполняет вызывающий код)."""
        return self._create_result(
            new_state=CalculatorState.empty(),
            previous_state=state,
            action=AuditAction.CLEAR,
            transition_reason="clear",
        )
    
    def apply_equals(self, state: CalculatorState) -> TransitionResult:
        """Equals: вычисление и возврат в IDLE с результатом в inputA."""
        if not can_compute(state):
            return self._unchanged(state, "not_computable")
        
        try:
            result = compute(
                state.input_a,
                state.operator.value,
                state.input_b,
                self.config.fractional_digits,
            )
        except CalculatorError as e:
            return self._error_result(state, e, "compute_failed")
        
        return self._create_result(
            new_state=CalculatorState(input_a=result),
            previous_state=state,
            action=AuditAction.COMPUTE,
            transition_reason="compute",
            metadata={"result": result},
        )
    
    def _unchanged(self, state: CalculatorState, reason: str) -> TransitionResult:
        return TransitionResult.unchanged(state, reason)
    
    def _error_result(
        self,
        state: CalculatorState,
        error: CalculatorError,
        reason: str,
    ) -> TransitionResult:
        """Ошибка engine: состояние сохраняется, аудируется ERROR."""
        return self._create_result(
            new_state=state,
            previous_state=state,
            action=AuditAction.ERROR,
            transition_reason=reason,
            error=error,
            metadata={"error": error.code, "message": str(error)},
        )
    
    def _create_result(
        self,
        new_state: CalculatorState,
        previous_state: CalculatorState,
        action: Optional[AuditAction],
        transition_reason: str,
        error: Optional[CalculatorError] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> TransitionResult:
        """Создание результата перехода."""
        return TransitionResult(
            new_state=new_state,
            previous_state=previous_state,
            action=action,
            transition_reason=transition_reason,
            error=error,
            metadata=metadata or {},
        )


def transition(
    state: CalculatorState,
    token: str,
    config: Optional[CalculatorConfig] = None,
    replace_operand: bool = False,
) -> TransitionResult:
    """Чистый переход (state, token) → TransitionResult."""
    return CalculatorStateMachine(config).evaluate_transition(state, token, replace_operand)
