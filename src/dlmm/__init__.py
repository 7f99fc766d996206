"""DLMM — комиссии, launch-фаза и price guard.

- FeeModel: base + variable комиссия с cap (decimal-space)
- LaunchPhasePolicy: allowlist + убывающий surcharge τ(t)
- compute_price_guard: граница цены из допустимого impact
"""

from .fee_model import DEFAULT_MAX_FEE_RATE, FeeBreakdown, FeeModel
from .launch_policy import (
    CosineDecay,
    DecayCurve,
    ExponentialDecay,
    LaunchPhasePolicy,
    LinearDecay,
    load_allowlist,
    parse_allowlist,
)
from .price_guard import (
    CHECKPOINT_LABELS,
    GuardCheckpoint,
    PriceGuardResult,
    SwapDirection,
    compute_price_guard,
    guard_checkpoints,
)

__all__ = [
    # Fees
    "DEFAULT_MAX_FEE_RATE",
    "FeeBreakdown",
    "FeeModel",
    # Launch phase
    "CosineDecay",
    "DecayCurve",
    "ExponentialDecay",
    "LaunchPhasePolicy",
    "LinearDecay",
    "load_allowlist",
    "parse_allowlist",
    # Price guard
    "CHECKPOINT_LABELS",
    "GuardCheckpoint",
    "PriceGuardResult",
    "SwapDirection",
    "compute_price_guard",
    "guard_checkpoints",
]
