"""
LogisticAllocator — инвертированная логистическая кривая target supply

Целевая цена как функция supply:
    P(S) = p_min + (p_max - p_min) / (1 + exp(-k·(S - S_mid)))

Инверсия (определена только при p_min < P < p_max):
    S(P) = S_mid - (1/k) · ln((p_max - P) / (P - p_min))

Auto-calibration (s_mid = 0): S_mid = (1/k) · ln((p_max - P_0) / (P_0 - p_min)),
так что S(P_0) = 0.

Аллокация бина:
    ΔX_i = S(P_{i+1}) - S(P_i)
         = (1/k) · [ ln1p((P_{i+1} - P_i) / (P_i - p_min))
                   + ln1p((P_{i+1} - P_i) / (p_max - P_{i+1})) ]
Вторая форма — сумма двух неотрицательных логарифмов без S_mid: нет
катастрофического сокращения при малом k, где S(P) ~ 1/k велико, а разность
мала.

Варианты бина:
- INTERIOR: P_i и P_{i+1} строго внутри (p_min, p_max)
- BOUNDARY: последний частичный бин, P_{i+1} >= p_max. Верхний target supply
  явно clamp-ится к S(p_max - eps), eps = (p_max - p_min) · 1e-12
Бины с P_i >= p_max - eps исключаются из расписания (сетка усекается).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. p_min < p0 < p_max, иначе DomainError с неравенством и значениями
2. k > 0
3. ΔX_i >= 0 (S(P) монотонно растёт)
4. Инверсия никогда не вычисляется на границах домена
"""

import logging
import math
from enum import Enum
from typing import Final

from src.core.domain.schedule import AllocationMode
from src.core.exceptions import DomainError
from src.core.math.numerical_safeguards import validate_finite, validate_positive
from src.core.math.price_lattice import PriceLattice
from src.curves.base import Allocator

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Отступ от p_max (в долях p_max - p_min) для clamp последнего бина
LOGISTIC_BOUNDARY_EPS_FRAC: Final[float] = 1e-12


# =============================================================================
# ENUMS
# =============================================================================


class BinVariant(str, Enum):
    """Положение бина относительно домена инверсии"""

    INTERIOR = "interior"
    BOUNDARY = "boundary"


# =============================================================================
# ALLOCATOR
# =============================================================================


class LogisticAllocator(Allocator):
    """
    Логистический аллокатор на сетке цен.

    Сетка усекается на p_max: в расписание попадают только бины с
    нижней ценой строго внутри домена.
    """

    mode = AllocationMode.LOGISTIC
    name = "Logistic-S(on DLMM bins)"

    def __init__(
        self,
        lattice: PriceLattice,
        p_min: float,
        p_max: float,
        k: float,
        s_mid: float = 0.0,
    ):
        super().__init__(lattice)

        validate_finite(p_min, "p_min")
        validate_finite(p_max, "p_max")
        validate_positive(k, "k")
        validate_finite(s_mid, "s_mid")

        p0 = lattice.p0
        if not (p_min < p0 < p_max):
            raise DomainError("p_min < p0 < p_max", p_min=p_min, p0=p0, p_max=p_max)

        self.p_min = p_min
        self.p_max = p_max
        self.k = k
        self.boundary_eps = (p_max - p_min) * LOGISTIC_BOUNDARY_EPS_FRAC
        self.p_cap = p_max - self.boundary_eps

        if p0 >= self.p_cap:
            raise DomainError(
                "p0 < p_max - eps", p0=p0, p_max=p_max, eps=self.boundary_eps
            )

        self.auto_calibrated = s_mid == 0.0
        if self.auto_calibrated:
            self.s_mid = math.log((p_max - p0) / (p0 - p_min)) / k
        else:
            self.s_mid = s_mid

        self._uppers, self._variants = self._plan_bins()

        truncated = lattice.bins - len(self._uppers)
        if truncated > 0:
            logger.warning(
                "logistic: lattice truncated at p_max=%s: %d of %d bins excluded",
                p_max,
                truncated,
                lattice.bins,
            )

        logger.debug(
            "logistic allocator: p_min=%s p_max=%s k=%s s_mid=%s (auto=%s) bins=%d",
            p_min,
            p_max,
            k,
            self.s_mid,
            self.auto_calibrated,
            len(self._uppers),
        )

    # -------------------------------------------------------------------------
    # Планирование бинов
    # -------------------------------------------------------------------------

    def _plan_bins(self) -> tuple[list[float], list[BinVariant]]:
        """
        Верхние границы и варианты для бинов, попадающих в расписание.

        Проход останавливается после первого BOUNDARY бина.
        """
        uppers: list[float] = []
        variants: list[BinVariant] = []
        for i in range(self.lattice.bins):
            if self.lattice.price(i) >= self.p_cap:
                break
            upper = self.lattice.upper_price(i)
            if upper >= self.p_cap:
                uppers.append(self.p_cap)
                variants.append(BinVariant.BOUNDARY)
                break
            uppers.append(upper)
            variants.append(BinVariant.INTERIOR)
        return uppers, variants

    # -------------------------------------------------------------------------
    # Кривая
    # -------------------------------------------------------------------------

    def _check_domain(self, price: float) -> None:
        if not (self.p_min < price < self.p_max):
            raise DomainError(
                "p_min < P < p_max", p_min=self.p_min, P=price, p_max=self.p_max
            )

    def target_supply(self, price: float) -> float:
        """
        S(P) = S_mid - (1/k) · ln((p_max - P) / (P - p_min)).

        Raises:
            DomainError: Если P вне открытого интервала (p_min, p_max)
        """
        self._check_domain(price)
        return self.s_mid - math.log((self.p_max - price) / (price - self.p_min)) / self.k

    def price_of_supply(self, supply: float) -> float:
        """P(S) = p_min + (p_max - p_min) / (1 + exp(-k·(S - S_mid)))."""
        z = -self.k * (supply - self.s_mid)
        # exp(z) переполняется при z > ~709: P → p_min
        if z > 700.0:
            return self.p_min
        return self.p_min + (self.p_max - self.p_min) / (1.0 + math.exp(z))

    def _supply_between(self, lower: float, upper: float) -> float:
        """S(upper) - S(lower) без вычисления S_mid."""
        width = upper - lower
        return (
            math.log1p(width / (lower - self.p_min))
            + math.log1p(width / (self.p_max - upper))
        ) / self.k

    # -------------------------------------------------------------------------
    # Allocator
    # -------------------------------------------------------------------------

    @property
    def bins(self) -> int:
        return len(self._uppers)

    @property
    def variants(self) -> list[BinVariant]:
        return list(self._variants)

    @property
    def truncated(self) -> bool:
        """True если последний бин упёрся в p_max."""
        return bool(self._variants) and self._variants[-1] is BinVariant.BOUNDARY

    def upper_price(self, i: int) -> float:
        """Верхняя граница бина i (после clamp для BOUNDARY)."""
        if i < 0 or i >= self.bins:
            raise IndexError(f"bin index {i} outside [0, {self.bins - 1}]")
        return self._uppers[i]

    def delta_x(self, i: int) -> float:
        """ΔX_i = S(upper_i) - S(P_i)."""
        return self._supply_between(self.price_of_bin(i), self.upper_price(i))

    def closed_form_supply(self) -> float:
        """
        Телескопическая сумма: S(upper_{n-1}) - S(P_0).

        Вычисляется одним выражением по крайним точкам, независимо от
        поэлементной суммы.
        """
        return self._supply_between(self.lattice.p0, self._uppers[-1])
