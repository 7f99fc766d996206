"""
Numerical Safeguards — проверки домена и относительная ошибка

Модуль обеспечивает единый способ проверки входных параметров движка:
- Проверка конечности (NaN/Inf никогда не попадают в расчёт)
- Проверки знака и диапазона с DomainError, называющим неравенство
- Относительная ошибка для верификации

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Каждая проверка, которая падает, сообщает неравенство и значение
2. NaN/Inf отвергаются до любого вычисления
3. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

from src.core.exceptions import DomainError

# =============================================================================
# CONSTANTS
# =============================================================================

# Basis points в единице
BPS_DENOMINATOR: Final[float] = 10_000.0


# =============================================================================
# КОНВЕРСИИ
# =============================================================================


def bps_to_fraction(bps: float) -> float:
    """
    Конверсия basis points в дробь.

    Examples:
        >>> bps_to_fraction(10.0)
        0.001
    """
    return bps / BPS_DENOMINATOR


def pct_to_fraction(pct: float) -> float:
    """Конверсия процентов в дробь (3.0 → 0.03)."""
    return pct / 100.0


# =============================================================================
# СРАВНЕНИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """True если значение конечно (не NaN, не Inf)."""
    return math.isfinite(value)


def relative_error(value: float, reference: float) -> float:
    """
    Относительная ошибка |value - reference| / |reference|.

    При reference == 0 возвращает абсолютную ошибку (0.0 если оба нуля).

    Examples:
        >>> relative_error(101.0, 100.0)
        0.01
        >>> relative_error(0.0, 0.0)
        0.0
    """
    diff = abs(value - reference)
    if reference == 0.0:
        return diff
    return diff / abs(reference)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_finite(value: float, name: str) -> None:
    """
    Валидация, что значение конечно.

    Raises:
        DomainError: Если value NaN/Inf
    """
    if not is_valid_float(value):
        raise DomainError(f"{name} is finite", **{name: value})


def validate_positive(value: float, name: str) -> None:
    """
    Валидация, что значение строго положительное.

    Raises:
        DomainError: Если value <= 0 или NaN/Inf
    """
    validate_finite(value, name)
    if value <= 0:
        raise DomainError(f"{name} > 0", **{name: value})


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное.

    Raises:
        DomainError: Если value < 0 или NaN/Inf
    """
    validate_finite(value, name)
    if value < 0:
        raise DomainError(f"{name} >= 0", **{name: value})


def validate_in_range(
    value: float,
    name: str,
    min_value: float,
    max_value: float,
) -> None:
    """
    Валидация, что значение в замкнутом диапазоне [min_value, max_value].

    Raises:
        DomainError: Если value вне диапазона или NaN/Inf
    """
    validate_finite(value, name)
    if value < min_value or value > max_value:
        raise DomainError(f"{min_value} <= {name} <= {max_value}", **{name: value})
