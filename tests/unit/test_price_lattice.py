"""
Тесты для PriceLattice

Проверяемые инварианты:
1. P_i = P_0 · q^i, n + 1 цен для n бинов
2. Строгая монотонность цен
3. Sizing по end_price: P_n >= P_end
4. Ровно один из bins / end_price
"""

import math

import pytest

from src.core.exceptions import DomainError
from src.core.math.price_lattice import (
    DEFAULT_BINS,
    PriceLattice,
    bins_from_end_price,
    growth_factor,
)

# =============================================================================
# SIZING
# =============================================================================


class TestSizing:
    """Тесты growth_factor / bins_from_end_price"""

    def test_growth_factor(self) -> None:
        assert growth_factor(10.0) == pytest.approx(1.001)
        assert growth_factor(100.0) == pytest.approx(1.01)

    def test_bins_from_end_price(self) -> None:
        """ln(1.5) / ln(1.01) = 40.75 → 41 бин"""
        assert bins_from_end_price(1.0, 100.0, 1.5) == 41
        assert bins_from_end_price(0.01, 10.0, 0.02) == 694

    def test_bins_from_end_price_reaches_end(self) -> None:
        p0, step, end = 0.01, 25.0, 0.37
        n = bins_from_end_price(p0, step, end)
        q = growth_factor(step)
        assert p0 * q**n >= end
        assert p0 * q ** (n - 1) < end

    def test_bins_from_end_price_at_least_one(self) -> None:
        """Конечная цена внутри первого бина → 1 бин"""
        assert bins_from_end_price(1.0, 100.0, 1.000001) == 1

    def test_end_price_not_above_p0_rejected(self) -> None:
        with pytest.raises(DomainError, match="end_price > p0"):
            bins_from_end_price(1.0, 10.0, 1.0)
        with pytest.raises(DomainError, match="end_price > p0"):
            bins_from_end_price(1.0, 10.0, 0.5)


# =============================================================================
# LATTICE
# =============================================================================


class TestPriceLattice:
    """Тесты PriceLattice"""

    def test_prices_are_powers(self) -> None:
        lattice = PriceLattice(p0=0.01, bin_step_bps=10.0, bins=DEFAULT_BINS)
        assert lattice.bins == 500
        assert len(lattice) == 501
        assert lattice.price(0) == 0.01
        for i in (1, 17, 250, 500):
            assert lattice.price(i) == pytest.approx(0.01 * 1.001**i, rel=1e-14)

    def test_strictly_increasing(self) -> None:
        lattice = PriceLattice(p0=1e-6, bin_step_bps=1.0, bins=2_000)
        prices = lattice.prices
        assert all(a < b for a, b in zip(prices, prices[1:]))

    def test_upper_price(self) -> None:
        lattice = PriceLattice(p0=1.0, bin_step_bps=100.0, bins=3)
        assert lattice.upper_price(0) == lattice.price(1)
        assert lattice.upper_price(2) == lattice.terminal_price
        with pytest.raises(IndexError):
            lattice.upper_price(3)
        with pytest.raises(IndexError):
            lattice.price(4)

    def test_end_price_sizing(self) -> None:
        lattice = PriceLattice(p0=1.0, bin_step_bps=100.0, end_price=1.5)
        assert lattice.bins == 41
        assert lattice.terminal_price >= 1.5

    def test_step_fraction_and_q(self) -> None:
        lattice = PriceLattice(p0=1.0, bin_step_bps=25.0, bins=1)
        assert lattice.step_fraction == pytest.approx(0.0025)
        assert lattice.q == pytest.approx(1.0025)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {},
            {"bins": 10, "end_price": 2.0},
        ],
    )
    def test_exactly_one_sizing_option(self, kwargs: dict) -> None:
        with pytest.raises(DomainError, match="exactly one of bins / end_price"):
            PriceLattice(p0=1.0, bin_step_bps=10.0, **kwargs)

    @pytest.mark.parametrize("p0", [0.0, -1.0, math.nan, math.inf])
    def test_invalid_p0(self, p0: float) -> None:
        with pytest.raises(DomainError):
            PriceLattice(p0=p0, bin_step_bps=10.0, bins=10)

    @pytest.mark.parametrize("step", [0.0, -5.0])
    def test_invalid_step(self, step: float) -> None:
        with pytest.raises(DomainError, match="bin_step_bps > 0"):
            PriceLattice(p0=1.0, bin_step_bps=step, bins=10)

    def test_zero_bins_rejected(self) -> None:
        with pytest.raises(DomainError, match="bins >= 1"):
            PriceLattice(p0=1.0, bin_step_bps=10.0, bins=0)

    def test_overflow_reported_as_domain_error(self) -> None:
        """q^n вне диапазона float → DomainError, не OverflowError/Inf"""
        with pytest.raises(DomainError, match="is finite"):
            PriceLattice(p0=1e300, bin_step_bps=10_000.0, bins=2_000)
