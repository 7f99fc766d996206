"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. Конверсии bps / проценты → дроби
2. Проверку конечности и относительную ошибку
3. Валидацию параметров с DomainError, называющим неравенство
"""

import math

import pytest

from src.core.exceptions import DomainError
from src.core.math.numerical_safeguards import (
    BPS_DENOMINATOR,
    bps_to_fraction,
    is_valid_float,
    pct_to_fraction,
    relative_error,
    validate_finite,
    validate_in_range,
    validate_non_negative,
    validate_positive,
)

# =============================================================================
# ТЕСТЫ КОНВЕРСИЙ
# =============================================================================


class TestConversions:
    """Тесты bps_to_fraction / pct_to_fraction"""

    def test_bps_to_fraction(self) -> None:
        """10 bps = 0.1% = 0.001"""
        assert bps_to_fraction(10.0) == 0.001
        assert bps_to_fraction(BPS_DENOMINATOR) == 1.0
        assert bps_to_fraction(0.0) == 0.0

    def test_pct_to_fraction(self) -> None:
        """50% = 0.5"""
        assert pct_to_fraction(50.0) == 0.5
        assert pct_to_fraction(3.0) == pytest.approx(0.03)


# =============================================================================
# ТЕСТЫ СРАВНЕНИЙ
# =============================================================================


class TestComparisons:
    """Тесты is_valid_float / relative_error"""

    def test_is_valid_float(self) -> None:
        assert is_valid_float(1.0)
        assert not is_valid_float(float("nan"))
        assert not is_valid_float(float("inf"))
        assert not is_valid_float(float("-inf"))

    def test_relative_error(self) -> None:
        assert relative_error(101.0, 100.0) == pytest.approx(0.01)
        assert relative_error(99.0, -100.0) == pytest.approx(1.99)
        assert relative_error(5.0, 5.0) == 0.0

    def test_relative_error_zero_reference(self) -> None:
        """При reference == 0 возвращается абсолютная ошибка"""
        assert relative_error(0.0, 0.0) == 0.0
        assert relative_error(1e-3, 0.0) == 1e-3


# =============================================================================
# ТЕСТЫ ВАЛИДАЦИИ
# =============================================================================


class TestValidation:
    """Тесты validate_* функций"""

    def test_validate_positive_ok(self) -> None:
        validate_positive(1e-12, "x")
        validate_positive(10.0, "x")

    @pytest.mark.parametrize("value", [0.0, -1.0, -1e-300])
    def test_validate_positive_rejects(self, value: float) -> None:
        with pytest.raises(DomainError, match=r"x > 0") as exc_info:
            validate_positive(value, "x")
        assert exc_info.value.inequality == "x > 0"
        assert exc_info.value.values == {"x": value}

    def test_validate_positive_rejects_nan(self) -> None:
        with pytest.raises(DomainError, match="is finite"):
            validate_positive(float("nan"), "p0")

    def test_validate_finite(self) -> None:
        validate_finite(-5.0, "y")
        with pytest.raises(DomainError, match="y is finite"):
            validate_finite(math.inf, "y")

    def test_validate_non_negative(self) -> None:
        validate_non_negative(0.0, "a")
        with pytest.raises(DomainError, match=r"a >= 0"):
            validate_non_negative(-0.1, "a")

    def test_validate_in_range(self) -> None:
        validate_in_range(0.0, "f", 0.0, 1.0)
        validate_in_range(1.0, "f", 0.0, 1.0)
        with pytest.raises(DomainError, match=r"0.0 <= f <= 1.0"):
            validate_in_range(1.5, "f", 0.0, 1.0)
        with pytest.raises(DomainError):
            validate_in_range(-0.01, "f", 0.0, 1.0)

    def test_domain_error_is_value_error(self) -> None:
        """DomainError совместим с ValueError"""
        with pytest.raises(ValueError):
            validate_positive(-1.0, "x")

    def test_domain_error_message_names_values(self) -> None:
        err = DomainError("p_min < p0 < p_max", p_min=0.002, p0=0.001, p_max=0.05)
        message = str(err)
        assert "p_min < p0 < p_max" in message
        assert "p_min=0.002" in message
        assert "p0=0.001" in message
        assert "p_max=0.05" in message
