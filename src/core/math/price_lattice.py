"""
PriceLattice — экспоненциальная сетка цен DLMM

Формулы:
    q   = 1 + bin_step_bps / 10000
    P_i = P_0 * q^i,   i = 0..n
    n   = max(1, ceil(ln(P_end / P_0) / ln(q)))   (при задании конечной цены)

Сетка из n бинов содержит n + 1 цен: бин i покрывает интервал [P_i, P_{i+1}).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. P_i < P_{i+1} строго для всех соседних пар
2. Каждая цена вычисляется через степень (p0 * q**i), без накопления
   ошибки от повторного умножения
3. Immutable после создания
"""

import math
from typing import Final, Optional

from src.core.exceptions import DomainError
from src.core.math.numerical_safeguards import (
    bps_to_fraction,
    validate_finite,
    validate_positive,
)

# =============================================================================
# CONSTANTS
# =============================================================================

# Количество бинов, если не задано ни bins, ни end_price
DEFAULT_BINS: Final[int] = 500


# =============================================================================
# SIZING
# =============================================================================


def growth_factor(bin_step_bps: float) -> float:
    """q = 1 + bin_step_bps / 10000."""
    return 1.0 + bps_to_fraction(bin_step_bps)


def bins_from_end_price(p0: float, bin_step_bps: float, end_price: float) -> int:
    """
    Количество бинов, достаточное для достижения конечной цены.

    n = max(1, ceil(ln(P_end / P_0) / ln(q)))  ⇒  P_n >= P_end

    Raises:
        DomainError: Если p0 <= 0, bin_step_bps <= 0 или end_price <= p0

    Examples:
        >>> bins_from_end_price(1.0, 100.0, 1.5)
        41
        >>> bins_from_end_price(0.01, 10.0, 0.02)
        694
    """
    validate_positive(p0, "p0")
    validate_positive(bin_step_bps, "bin_step_bps")
    validate_finite(end_price, "end_price")
    if end_price <= p0:
        raise DomainError("end_price > p0", end_price=end_price, p0=p0)

    # log1p точнее log(q) при малом шаге
    ln_q = math.log1p(bps_to_fraction(bin_step_bps))
    n = math.ceil(math.log(end_price / p0) / ln_q)
    return max(n, 1)


# =============================================================================
# LATTICE
# =============================================================================


class PriceLattice:
    """
    Immutable экспоненциальная сетка цен.

    Ровно один из параметров bins / end_price должен быть задан.
    """

    __slots__ = ("_p0", "_bin_step_bps", "_q", "_bins", "_prices")

    def __init__(
        self,
        p0: float,
        bin_step_bps: float,
        bins: Optional[int] = None,
        end_price: Optional[float] = None,
    ):
        validate_positive(p0, "p0")
        validate_positive(bin_step_bps, "bin_step_bps")

        if (bins is None) == (end_price is None):
            raise DomainError(
                "exactly one of bins / end_price", bins=bins, end_price=end_price
            )

        if bins is not None:
            if bins < 1:
                raise DomainError("bins >= 1", bins=bins)
            n = int(bins)
        else:
            n = bins_from_end_price(p0, bin_step_bps, end_price)

        q = growth_factor(bin_step_bps)
        try:
            prices = tuple(p0 * q**i for i in range(n + 1))
        except OverflowError as e:
            raise DomainError("p0 * q**bins is finite", p0=p0, q=q, bins=n) from e

        # q**n конечен, но p0 * q**n может переполниться в Inf
        if not math.isfinite(prices[-1]):
            raise DomainError("p0 * q**bins is finite", p0=p0, q=q, bins=n)

        self._p0 = p0
        self._bin_step_bps = bin_step_bps
        self._q = q
        self._bins = n
        self._prices = prices

    # -------------------------------------------------------------------------
    # Свойства
    # -------------------------------------------------------------------------

    @property
    def p0(self) -> float:
        return self._p0

    @property
    def bin_step_bps(self) -> float:
        return self._bin_step_bps

    @property
    def step_fraction(self) -> float:
        """s = bin_step_bps / 10000."""
        return bps_to_fraction(self._bin_step_bps)

    @property
    def q(self) -> float:
        return self._q

    @property
    def bins(self) -> int:
        """Количество бинов (интервалов) n."""
        return self._bins

    @property
    def prices(self) -> tuple[float, ...]:
        """Все n + 1 цен P_0..P_n."""
        return self._prices

    @property
    def terminal_price(self) -> float:
        """P_n."""
        return self._prices[-1]

    # -------------------------------------------------------------------------
    # Доступ
    # -------------------------------------------------------------------------

    def price(self, i: int) -> float:
        """Нижняя цена бина i (P_i)."""
        if i < 0 or i > self._bins:
            raise IndexError(f"bin index {i} outside [0, {self._bins}]")
        return self._prices[i]

    def upper_price(self, i: int) -> float:
        """Верхняя граница бина i (P_{i+1})."""
        if i < 0 or i >= self._bins:
            raise IndexError(f"bin index {i} outside [0, {self._bins - 1}]")
        return self._prices[i + 1]

    def __len__(self) -> int:
        return len(self._prices)

    def __repr__(self) -> str:
        return (
            f"PriceLattice(p0={self._p0!r}, bin_step_bps={self._bin_step_bps!r}, "
            f"bins={self._bins})"
        )
