"""
Тесты для Input Validation

Проверяет:
1. is_digit / is_operator
2. can_append_decimal (учитывается только active operand)
3. enforce_max_length (новые символы сверх лимита отбрасываются)
4. can_compute / is_complete_decimal
5. Отображение клавиш в токены
"""

import pytest

from src.calculator.tokens import BACKSPACE, CLEAR, DECIMAL, EQUALS, token_from_key
from src.calculator.validation import (
    MAX_INPUT_LENGTH,
    can_append_decimal,
    can_compute,
    enforce_max_length,
    is_complete_decimal,
    is_digit,
    is_operator,
)
from src.core.domain import CalculatorState


def make_state(a: str = "", op=None, b: str = "") -> CalculatorState:
    return CalculatorState(input_a=a, operator=op, input_b=b)


class TestTokenPredicates:
    """Тесты is_digit / is_operator"""

    @pytest.mark.parametrize("token", list("0123456789"))
    def test_ascii_digits(self, token: str) -> None:
        assert is_digit(token)

    @pytest.mark.parametrize("token", ["a", "12", "", "٣", ".", None, 5])
    def test_non_digits(self, token) -> None:
        assert not is_digit(token)

    @pytest.mark.parametrize("token", ["+", "-", "*", "/"])
    def test_operators(self, token: str) -> None:
        assert is_operator(token)

    @pytest.mark.parametrize("token", ["x", "", "++", "=", None])
    def test_non_operators(self, token) -> None:
        assert not is_operator(token)


class TestCanAppendDecimal:
    """Тесты can_append_decimal"""

    def test_operand_a_with_point(self) -> None:
        assert not can_append_decimal(make_state("12.3"))

    def test_operand_b_with_point(self) -> None:
        assert not can_append_decimal(make_state("12", "+", "4.56"))

    def test_empty_operand(self) -> None:
        assert can_append_decimal(make_state())

    def test_point_in_inactive_operand_ignored(self) -> None:
        """Точка в inputA не мешает вводу точки в inputB"""
        assert can_append_decimal(make_state("1.5", "+", ""))
        assert can_append_decimal(make_state("1.5", "+", "2"))


class TestEnforceMaxLength:
    """Тесты enforce_max_length"""

    def test_truncates_to_limit(self) -> None:
        assert len(enforce_max_length("12345678901234567", 16)) == 16

    def test_keeps_earliest_characters(self) -> None:
        assert enforce_max_length("12345678901234567", 16) == "1234567890123456"

    @pytest.mark.parametrize("length", range(0, 40, 3))
    def test_never_exceeds_limit(self, length: int) -> None:
        text = "7" * length
        result = enforce_max_length(text, 16)
        assert len(result) <= 16
        if length <= 16:
            assert result == text

    def test_default_limit(self) -> None:
        assert MAX_INPUT_LENGTH == 16
        assert enforce_max_length("9" * 20) == "9" * 16

    def test_non_positive_limit_rejected(self) -> None:
        with pytest.raises(ValueError, match="max_length"):
            enforce_max_length("1", 0)


class TestCanCompute:
    """Тесты can_compute"""

    def test_complete_expression(self) -> None:
        assert can_compute(make_state("2", "+", "2"))

    def test_trailing_point_rejected(self) -> None:
        assert not can_compute(make_state("2.", "+", "2"))
        assert not can_compute(make_state("2", "+", "2."))

    def test_missing_operand_b(self) -> None:
        assert not can_compute(make_state("2", "+", ""))

    def test_missing_operand_a(self) -> None:
        assert not can_compute(make_state("", "+", "2"))

    def test_missing_operator(self) -> None:
        assert not can_compute(make_state("2"))

    def test_negative_result_operand(self) -> None:
        assert can_compute(make_state("-3", "*", "2.5"))

    @pytest.mark.parametrize(
        "text,expected",
        [("1", True), ("0.5", True), ("-2", True), ("2.", False), ("", False), ("-", False), (".5", False)],
    )
    def test_is_complete_decimal(self, text: str, expected: bool) -> None:
        assert is_complete_decimal(text) is expected


class TestTokenFromKey:
    """Тесты отображения клавиш в токены"""

    @pytest.mark.parametrize(
        "key,token",
        [
            ("7", "7"),
            ("+", "+"),
            ("/", "/"),
            (".", DECIMAL),
            ("Enter", EQUALS),
            ("=", EQUALS),
            ("Backspace", BACKSPACE),
            ("Escape", CLEAR),
            ("c", CLEAR),
            ("C", CLEAR),
        ],
    )
    def test_known_keys(self, key: str, token: str) -> None:
        assert token_from_key(key) == token

    @pytest.mark.parametrize("key", ["x", "Shift", "", "F1"])
    def test_unknown_keys(self, key: str) -> None:
        assert token_from_key(key) is None
