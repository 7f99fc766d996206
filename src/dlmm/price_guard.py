"""
PriceGuard — граница цены исполнения из допустимого price impact

Формулы:
    BASE_TO_QUOTE (продажа X за Y):  p_bound = p_spot · 10000 / (10000 - impact_bps)
    QUOTE_TO_BASE (продажа Y за X):  p_bound = p_spot · (10000 - impact_bps) / 10000

Stateless: каждый вызов независим.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final, Literal, Sequence

from src.core.domain.schedule import AllocationSchedule
from src.core.exceptions import DomainError
from src.core.math.numerical_safeguards import (
    BPS_DENOMINATOR,
    validate_finite,
    validate_positive,
)


# =============================================================================
# CONSTANTS
# =============================================================================

CheckpointLabel = Literal["start", "mid", "end"]

# Опорные бины расписания для guard_checkpoints
CHECKPOINT_LABELS: Final[tuple[CheckpointLabel, ...]] = ("start", "mid", "end")


# =============================================================================
# ENUMS
# =============================================================================


class SwapDirection(str, Enum):
    """Направление свопа"""

    BASE_TO_QUOTE = "base_to_quote"  # X → Y
    QUOTE_TO_BASE = "quote_to_base"  # Y → X


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class PriceGuardResult:
    """Вычисленная граница цены."""

    direction: SwapDirection
    p_spot: float
    impact_bps: float
    p_bound: float


@dataclass(frozen=True)
class GuardCheckpoint:
    """Границы цены в опорном бине расписания (для metadata)."""

    label: str
    bin: int
    price: float
    base_to_quote: PriceGuardResult
    quote_to_base: PriceGuardResult


# =============================================================================
# GUARD
# =============================================================================


def compute_price_guard(
    p_spot: float,
    impact_bps: float,
    direction: SwapDirection,
) -> PriceGuardResult:
    """
    Граница цены исполнения.

    Raises:
        DomainError: p_spot <= 0, impact_bps < 0 или impact_bps >= 10000

    Examples:
        >>> compute_price_guard(1.0, 100.0, SwapDirection.QUOTE_TO_BASE).p_bound
        0.99
    """
    direction = SwapDirection(direction)
    validate_positive(p_spot, "p_spot")
    validate_finite(impact_bps, "impact_bps")
    if impact_bps < 0.0:
        raise DomainError("impact_bps >= 0", impact_bps=impact_bps)
    if impact_bps >= BPS_DENOMINATOR:
        # BASE_TO_QUOTE: деление на ноль/отрицательное; QUOTE_TO_BASE: граница <= 0
        raise DomainError(
            "impact_bps < 10000", impact_bps=impact_bps, direction=direction.value
        )

    if direction is SwapDirection.BASE_TO_QUOTE:
        p_bound = p_spot * BPS_DENOMINATOR / (BPS_DENOMINATOR - impact_bps)
    else:
        p_bound = p_spot * (BPS_DENOMINATOR - impact_bps) / BPS_DENOMINATOR

    return PriceGuardResult(
        direction=direction,
        p_spot=p_spot,
        impact_bps=impact_bps,
        p_bound=p_bound,
    )


def guard_checkpoints(
    schedule: AllocationSchedule,
    impact_bps: float,
    labels: Sequence[CheckpointLabel] = CHECKPOINT_LABELS,
) -> list[GuardCheckpoint]:
    """
    Границы цены в бинах start / mid / end расписания.

    Raises:
        DomainError: Если impact_bps вне [0, 10000) или label не из CHECKPOINT_LABELS
    """
    unknown = [label for label in labels if label not in CHECKPOINT_LABELS]
    if unknown:
        raise DomainError(
            "label in (start, mid, end)", labels=tuple(labels), unknown=tuple(unknown)
        )

    n = schedule.bins
    positions = {"start": 0, "mid": n // 2, "end": max(n - 1, 0)}
    checkpoints = []
    for label in labels:
        row = schedule.rows[positions[label]]
        checkpoints.append(
            GuardCheckpoint(
                label=label,
                bin=row.bin,
                price=row.price,
                base_to_quote=compute_price_guard(
                    row.price, impact_bps, SwapDirection.BASE_TO_QUOTE
                ),
                quote_to_base=compute_price_guard(
                    row.price, impact_bps, SwapDirection.QUOTE_TO_BASE
                ),
            )
        )
    return checkpoints
