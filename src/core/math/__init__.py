"""
Core math modules

Математические примитивы движка расписаний с гарантией стабильности.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Constants
    BPS_DENOMINATOR,
    # Conversions
    bps_to_fraction,
    pct_to_fraction,
    # Comparisons
    is_valid_float,
    relative_error,
    # Validation
    validate_finite,
    validate_in_range,
    validate_non_negative,
    validate_positive,
)

# Compensated Summation
from src.core.math.compensated_sum import (
    NeumaierAccumulator,
    compensated_prefix_sums,
    compensated_sum,
)

# Price Lattice
from src.core.math.price_lattice import (
    DEFAULT_BINS,
    PriceLattice,
    bins_from_end_price,
    growth_factor,
)

__all__ = [
    # Numerical Safeguards: Constants
    "BPS_DENOMINATOR",
    # Numerical Safeguards: Conversions
    "bps_to_fraction",
    "pct_to_fraction",
    # Numerical Safeguards: Comparisons
    "is_valid_float",
    "relative_error",
    # Numerical Safeguards: Validation
    "validate_finite",
    "validate_in_range",
    "validate_non_negative",
    "validate_positive",
    # Compensated Summation
    "NeumaierAccumulator",
    "compensated_prefix_sums",
    "compensated_sum",
    # Price Lattice
    "DEFAULT_BINS",
    "PriceLattice",
    "bins_from_end_price",
    "growth_factor",
]
