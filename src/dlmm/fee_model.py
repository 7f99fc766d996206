"""
FeeModel — комиссии DLMM в decimal-space

Формулы (s = bin_step_bps / 10000):
    fee_base  = B · s
    fee_var   = A · (v_a · s)^2
    fee_total = min(fee_base + fee_var, f_max)
    capped    = fee_base + fee_var > f_max

Все величины — десятичные дроби, не fixed-point.
"""

from dataclasses import dataclass
from typing import Final, Iterable

from src.core.math.numerical_safeguards import (
    bps_to_fraction,
    validate_in_range,
    validate_non_negative,
    validate_positive,
)

# =============================================================================
# CONSTANTS
# =============================================================================

# Cap комиссии по умолчанию (10%)
DEFAULT_MAX_FEE_RATE: Final[float] = 0.10


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class FeeBreakdown:
    """Разложение комиссии бина."""

    fee_base: float
    fee_var: float
    fee_total: float
    capped: bool

    @property
    def fee_total_uncapped(self) -> float:
        return self.fee_base + self.fee_var


# =============================================================================
# FEE MODEL
# =============================================================================


class FeeModel:
    """
    Комиссия DLMM: base + variable, с верхним cap.

    Examples:
        >>> fees = FeeModel(base_factor=1.0, variable_fee_control=0.0,
        ...                 max_fee_rate=0.05, bin_step_bps=100.0)
        >>> fees.breakdown(0.0).fee_total
        0.01
    """

    def __init__(
        self,
        base_factor: float,
        variable_fee_control: float,
        max_fee_rate: float,
        bin_step_bps: float,
    ):
        validate_non_negative(base_factor, "base_factor")
        validate_non_negative(variable_fee_control, "variable_fee_control")
        validate_in_range(max_fee_rate, "max_fee_rate", 0.0, 1.0)
        validate_positive(bin_step_bps, "bin_step_bps")

        self.base_factor = base_factor
        self.variable_fee_control = variable_fee_control
        self.max_fee_rate = max_fee_rate
        self.bin_step_bps = bin_step_bps

    @property
    def step_fraction(self) -> float:
        return bps_to_fraction(self.bin_step_bps)

    def base_fee_rate(self) -> float:
        """fee_base = B · s."""
        return self.base_factor * self.step_fraction

    def variable_fee_rate(self, vol_accum: float) -> float:
        """fee_var = A · (v_a · s)^2."""
        validate_non_negative(vol_accum, "vol_accum")
        return self.variable_fee_control * (vol_accum * self.step_fraction) ** 2

    def breakdown(self, vol_accum: float) -> FeeBreakdown:
        """
        Полное разложение комиссии при заданном volatility accumulator.

        Raises:
            DomainError: Если vol_accum < 0 или NaN/Inf
        """
        fee_base = self.base_fee_rate()
        fee_var = self.variable_fee_rate(vol_accum)
        uncapped = fee_base + fee_var
        capped = uncapped > self.max_fee_rate
        return FeeBreakdown(
            fee_base=fee_base,
            fee_var=fee_var,
            fee_total=self.max_fee_rate if capped else uncapped,
            capped=capped,
        )

    def total_fee_rate(self, vol_accum: float) -> float:
        return self.breakdown(vol_accum).fee_total

    def fee_curve(self, vol_accums: Iterable[float]) -> list[tuple[float, FeeBreakdown]]:
        """Серия (v_a, FeeBreakdown) для анализа комиссии от волатильности."""
        return [(va, self.breakdown(va)) for va in vol_accums]
