"""
GeometricAllocator — геометрическое затухание аллокаций по бинам

Формулы:
    r      = q^(θ-1)                     (decay factor)
    g      = q^θ                         (growth factor выручки на бин)
    ΔX_i   = ΔX_0 · r^i,   i = 0..n-1
    S_n    = ΔX_0 · (1 - r^n) / (1 - r)  (r ≠ 1)
    S_n    = ΔX_0 · n                    (r = 1, θ = 1)

Калибровка ΔX_0:
    target_supply S*:  ΔX_0 = S* · (1 - r) / (1 - r^n)   (или S*/n при r = 1)
    initial revenue R0: ΔX_0 = R0 / P_0

Численная устойчивость:
    Все степени r вычисляются через a = (θ-1)·ln(q), ln(q) = log1p(s):
        r^i     = exp(i·a)
        1 - r^n = -expm1(n·a)
    Это сохраняет точность при θ → 1 и при малом шаге бина, где 1 - r
    теряет почти все значащие цифры.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. θ <= 0 → DomainError
2. θ вне (0, 1) → ConfigurationWarning (расчёт продолжается)
3. Вариант закона выбирается по θ == 1 точно, не по epsilon-сравнению r
4. ΔX_i >= 0 для всех i
"""

import logging
import math
import warnings
from enum import Enum
from typing import Final, Optional

from src.core.domain.schedule import AllocationMode
from src.core.exceptions import ConfigurationWarning, DomainError
from src.core.math.numerical_safeguards import validate_finite, validate_positive
from src.core.math.price_lattice import PriceLattice
from src.curves.base import Allocator

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Верхняя граница аргумента exp/expm1 для r^n
MAX_EXP_ARG: Final[float] = 700.0


# =============================================================================
# ENUMS
# =============================================================================


class GeometricLaw(str, Enum):
    """Вариант закона аллокации"""

    CONSTANT = "constant"  # θ = 1, r = 1
    GEOMETRIC = "geometric"  # θ ≠ 1


# =============================================================================
# ALLOCATOR
# =============================================================================


class GeometricAllocator(Allocator):
    """
    Геометрический аллокатор на сетке цен.

    Ровно один из параметров target_supply / r0 должен быть задан.

    Examples:
        >>> lattice = PriceLattice(p0=0.01, bin_step_bps=10.0, bins=100)
        >>> alloc = GeometricAllocator(lattice, theta=0.6, target_supply=1_000.0)
        >>> abs(alloc.build_schedule().total_supply - 1_000.0) < 1e-6
        True
    """

    mode = AllocationMode.GEOMETRIC
    name = "DLMM-Geometric(θ)"

    def __init__(
        self,
        lattice: PriceLattice,
        theta: float,
        target_supply: Optional[float] = None,
        r0: Optional[float] = None,
    ):
        super().__init__(lattice)

        validate_finite(theta, "theta")
        if theta <= 0:
            # q^(θ-1) определён, но закон с θ <= 0 не имеет смысла для запуска
            raise DomainError("theta > 0", theta=theta)
        if theta >= 1.0:
            message = (
                f"theta={theta} outside recommended open interval (0, 1); "
                f"allocations will not decay with price"
            )
            logger.warning(message)
            warnings.warn(message, ConfigurationWarning, stacklevel=2)

        if (target_supply is None) == (r0 is None):
            raise DomainError(
                "exactly one of target_supply / r0",
                target_supply=target_supply,
                r0=r0,
            )

        self.theta = theta
        self.law = GeometricLaw.CONSTANT if theta == 1.0 else GeometricLaw.GEOMETRIC

        ln_q = math.log1p(lattice.step_fraction)
        self._ln_q = ln_q
        self._a = (theta - 1.0) * ln_q
        n = lattice.bins

        # При θ > 1 r^n растёт; exp переполняется при аргументе > ~709
        if self._a * n > MAX_EXP_ARG:
            raise DomainError(
                f"(theta - 1) * ln(q) * bins <= {MAX_EXP_ARG}",
                theta=theta,
                bins=n,
                bin_step_bps=lattice.bin_step_bps,
            )

        if target_supply is not None:
            validate_positive(target_supply, "target_supply")
            if self.law is GeometricLaw.CONSTANT:
                self._dx0 = target_supply / n
            else:
                # (1 - r) / (1 - r^n) = expm1(a) / expm1(n·a)
                self._dx0 = target_supply * math.expm1(self._a) / math.expm1(n * self._a)
        else:
            validate_positive(r0, "r0")
            self._dx0 = r0 / lattice.p0

        if not math.isfinite(self._dx0) or self._dx0 <= 0.0:
            raise DomainError(
                "delta_x0 is finite and > 0",
                delta_x0=self._dx0,
                theta=theta,
                bins=n,
            )

        logger.debug(
            "geometric allocator: law=%s r=%.12f g=%.12f dx0=%.12g bins=%d",
            self.law.value,
            self.r,
            self.g,
            self._dx0,
            n,
        )

    # -------------------------------------------------------------------------
    # Параметры закона
    # -------------------------------------------------------------------------

    @property
    def r(self) -> float:
        """Decay factor r = q^(θ-1)."""
        if self.law is GeometricLaw.CONSTANT:
            return 1.0
        return math.exp(self._a)

    @property
    def g(self) -> float:
        """Growth factor g = q^θ (выручка бина растёт как g^i)."""
        return math.exp(self.theta * self._ln_q)

    @property
    def delta_x0(self) -> float:
        return self._dx0

    @property
    def implied_r0(self) -> float:
        """Выручка бина 0: R0 = ΔX_0 · P_0."""
        return self._dx0 * self.lattice.p0

    @property
    def bins(self) -> int:
        return self.lattice.bins

    # -------------------------------------------------------------------------
    # Аллокации
    # -------------------------------------------------------------------------

    def delta_x(self, i: int) -> float:
        """ΔX_i = ΔX_0 · r^i."""
        if i < 0 or i >= self.bins:
            raise IndexError(f"bin index {i} outside [0, {self.bins - 1}]")
        if self.law is GeometricLaw.CONSTANT:
            return self._dx0
        return self._dx0 * math.exp(i * self._a)

    def closed_form_supply(self, n: Optional[int] = None) -> float:
        """
        S_n = ΔX_0 · (1 - r^n) / (1 - r), либо ΔX_0 · n при r = 1.

        Args:
            n: Количество бинов (default: все бины сетки)
        """
        if n is None:
            n = self.bins
        if n < 0:
            raise DomainError("n >= 0", n=n)
        if self.law is GeometricLaw.CONSTANT:
            return self._dx0 * n
        return self._dx0 * math.expm1(n * self._a) / math.expm1(self._a)
