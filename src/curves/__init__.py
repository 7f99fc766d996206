"""
Curves — аллокаторы токенов на сетке цен DLMM.

- GeometricAllocator: ΔX_i = ΔX_0 · r^i, r = q^(θ-1)
- LogisticAllocator: ΔX_i = S(P_{i+1}) - S(P_i) по инвертированной логистике
"""

from src.curves.base import Allocator
from src.curves.geometric import GeometricAllocator, GeometricLaw
from src.curves.logistic import (
    LOGISTIC_BOUNDARY_EPS_FRAC,
    BinVariant,
    LogisticAllocator,
)

__all__ = [
    "Allocator",
    # Geometric
    "GeometricAllocator",
    "GeometricLaw",
    # Logistic
    "LOGISTIC_BOUNDARY_EPS_FRAC",
    "BinVariant",
    "LogisticAllocator",
]
