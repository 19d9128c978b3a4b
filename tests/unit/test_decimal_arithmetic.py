"""
Тесты для Arithmetic Engine (decimal_arithmetic)

Проверяет:
1. Масштабированную арифметику без артефактов binary float
2. Деление и его защиту от деления на ноль
3. Форматирование результата (10 знаков, без хвостовых нулей)
4. Разбор операндов и ошибки InvalidNumber / InvalidOperator
5. Обратимость сложения вычитанием
"""

import math

import pytest

from src.core.errors import DivideByZero, InvalidNumber, InvalidOperator
from src.core.math.decimal_arithmetic import (
    DEFAULT_FRACTIONAL_DIGITS,
    compute,
    decimal_places,
    format_result,
    format_scaled,
    parse_operand,
    to_scaled,
)

# =============================================================================
# ТЕСТЫ ВЫЧИСЛЕНИЯ
# =============================================================================


class TestCompute:
    """Тесты для compute"""

    def test_addition_has_no_float_artifacts(self) -> None:
        """0.1 + 0.2 = 0.3 (а не 0.30000000000000004)"""
        assert compute("0.1", "+", "0.2") == "0.3"

    def test_trailing_zeros_and_point_trimmed(self) -> None:
        """Целый результат без десятичной точки"""
        assert compute("2.5000", "+", "0.5000") == "3"

    def test_subtraction(self) -> None:
        assert compute("9", "-", "3") == "6"
        assert compute("0.3", "-", "0.1") == "0.2"

    def test_negative_result(self) -> None:
        assert compute("3", "-", "5") == "-2"

    def test_multiplication(self) -> None:
        assert compute("5", "*", "6") == "30"
        assert compute("0.1", "*", "0.2") == "0.02"
        assert compute("1.5", "*", "1.5") == "2.25"

    def test_division(self) -> None:
        assert compute("8", "/", "2") == "4"

    def test_division_rounded_to_ten_digits(self) -> None:
        """Деление: не более 10 знаков после точки"""
        assert compute("1", "/", "3") == "0.3333333333"
        assert compute("2", "/", "3") == "0.6666666667"

    def test_negative_operand_from_previous_result(self) -> None:
        assert compute("-2", "+", "0.5") == "-1.5"

    def test_trailing_point_operand_accepted(self) -> None:
        assert compute("2.", "+", "1") == "3"

    def test_custom_fractional_digits(self) -> None:
        assert compute("1", "/", "3", fractional_digits=2) == "0.33"

    def test_large_product_is_exact(self) -> None:
        """Целое произведение не теряет младшие разряды"""
        assert compute("9999999999", "*", "9999999999") == "99999999980000000001"

    def test_large_sum_is_exact(self) -> None:
        assert compute("9999999999999999", "+", "1") == "10000000000000000"
        assert compute("99999999980000000001", "-", "1") == "99999999980000000000"


class TestComputeErrors:
    """Тесты ошибок compute"""

    def test_divide_by_zero(self) -> None:
        with pytest.raises(DivideByZero):
            compute("4", "/", "0")

    def test_divide_by_decimal_zero(self) -> None:
        with pytest.raises(DivideByZero):
            compute("4", "/", "0.00")

    def test_invalid_number(self) -> None:
        with pytest.raises(InvalidNumber):
            compute("a", "+", "1")

    @pytest.mark.parametrize("operand", ["", "inf", "nan", "1e5", " 1", "1.2.3", "--1"])
    def test_invalid_operand_forms(self, operand: str) -> None:
        with pytest.raises(InvalidNumber):
            compute(operand, "+", "1")

    def test_invalid_operator(self) -> None:
        with pytest.raises(InvalidOperator):
            compute("1", "x", "2")

    def test_number_checked_before_operator(self) -> None:
        """Невалидный операнд имеет приоритет над невалидным оператором"""
        with pytest.raises(InvalidNumber):
            compute("a", "x", "1")

    def test_errors_carry_codes(self) -> None:
        with pytest.raises(DivideByZero) as exc_info:
            compute("4", "/", "0")
        assert exc_info.value.code == "DIVIDE_BY_ZERO"


class TestAdditionReversibility:
    """compute(a, +, b) затем compute(result, -, b) восстанавливает a"""

    @pytest.mark.parametrize(
        "a,b",
        [
            ("0.1", "0.2"),
            ("123.456", "7.89"),
            ("1000000", "0.0001"),
            ("-3.5", "2.25"),
            ("0", "0"),
            ("42", "0.000001"),
            ("99.99", "0.01"),
        ],
    )
    def test_add_then_subtract_recovers_operand(self, a: str, b: str) -> None:
        total = compute(a, "+", b)
        recovered = compute(total, "-", b)
        assert math.isclose(float(recovered), float(a), abs_tol=1e-10)


# =============================================================================
# ТЕСТЫ РАЗБОРА И ФОРМАТИРОВАНИЯ
# =============================================================================


class TestParseOperand:
    """Тесты для parse_operand"""

    def test_plain_numbers(self) -> None:
        assert parse_operand("2.5") == 2.5
        assert parse_operand("-3") == -3.0
        assert parse_operand(".5") == 0.5

    def test_trailing_point(self) -> None:
        assert parse_operand("2.") == 2.0

    def test_overflowing_number_rejected(self) -> None:
        with pytest.raises(InvalidNumber):
            parse_operand("9" * 400)

    def test_non_string_rejected(self) -> None:
        with pytest.raises(InvalidNumber):
            parse_operand(5)  # type: ignore[arg-type]


class TestDecimalPlaces:
    """Тесты для decimal_places"""

    def test_counts_digits_after_point(self) -> None:
        assert decimal_places("12") == 0
        assert decimal_places("2.5000") == 4
        assert decimal_places("2.") == 0
        assert decimal_places("0.125") == 3


class TestFormatResult:
    """Тесты для format_result"""

    def test_whole_number(self) -> None:
        assert format_result(3.0) == "3"

    def test_large_whole_number_keeps_zeros(self) -> None:
        assert format_result(100.0) == "100"

    def test_negative_zero_normalised(self) -> None:
        assert format_result(-0.0) == "0"
        assert format_result(-1e-11) == "0"

    def test_tiny_value_rounds_to_zero(self) -> None:
        assert format_result(1e-11) == "0"

    def test_default_digits(self) -> None:
        assert DEFAULT_FRACTIONAL_DIGITS == 10
        assert format_result(0.12345678901234) == "0.123456789"

    def test_non_finite_rejected(self) -> None:
        with pytest.raises(InvalidNumber):
            format_result(float("inf"))
        with pytest.raises(InvalidNumber):
            format_result(float("nan"))


class TestScaledIntegers:
    """Тесты для to_scaled / format_scaled"""

    def test_to_scaled_pads_fraction(self) -> None:
        assert to_scaled("2.5", 2) == 250
        assert to_scaled("12", 0) == 12
        assert to_scaled("2.", 1) == 20

    def test_to_scaled_leading_point_and_sign(self) -> None:
        assert to_scaled(".5", 1) == 5
        assert to_scaled("-0.25", 2) == -25

    def test_to_scaled_rejects_too_few_places(self) -> None:
        with pytest.raises(ValueError):
            to_scaled("0.125", 2)

    def test_format_scaled_trims_zeros(self) -> None:
        assert format_scaled(300, 100) == "3"
        assert format_scaled(25, 100) == "0.25"
        assert format_scaled(-15, 10) == "-1.5"

    def test_format_scaled_rounds_half_away_from_zero(self) -> None:
        assert format_scaled(5, 10**11) == "0.0000000001"
        assert format_scaled(-5, 10**11) == "-0.0000000001"
        assert format_scaled(4, 10**11) == "0"
        assert format_scaled(-4, 10**11) == "0"

    def test_format_scaled_keeps_big_integers(self) -> None:
        assert format_scaled(99999999980000000001, 1) == "99999999980000000001"

    def test_format_scaled_rejects_non_positive_denominator(self) -> None:
        with pytest.raises(ValueError):
            format_scaled(1, 0)
