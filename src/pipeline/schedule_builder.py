"""ScheduleBuilder — сборка полного расписания запуска

Порядок:
1. PriceLattice из p0 / bin_step_bps / (bins | end_price)
2. Аллокатор по режиму (geometric | logistic) → AllocationSchedule
3. ScheduleVerifier: closed-form vs компенсированная сумма
4. FeeModel + LaunchPhasePolicy → ScheduleRow для каждого бина
5. Опционально: price guard checkpoints (start / mid / end)

Провал верификации не прерывает сборку: расписание выдаётся вместе с
отчётом, caller решает сам (result.report.raise_for_severity()).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from src.core.domain.schedule import AllocationMode, AllocationSchedule, ScheduleRow
from src.core.math.numerical_safeguards import pct_to_fraction
from src.core.math.price_lattice import PriceLattice
from src.curves.base import Allocator
from src.curves.geometric import GeometricAllocator
from src.curves.logistic import LogisticAllocator
from src.dlmm.fee_model import FeeBreakdown
from src.dlmm.launch_policy import LaunchPhasePolicy
from src.dlmm.price_guard import GuardCheckpoint, guard_checkpoints
from src.pipeline.config import ScheduleParams
from src.verification.schedule_verifier import ScheduleVerifier, VerificationReport

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class ScheduleResult:
    """Результат одного запуска."""

    params: ScheduleParams
    allocator: Allocator
    schedule: AllocationSchedule
    report: VerificationReport
    rows: tuple[ScheduleRow, ...]
    fee: FeeBreakdown
    surcharge_pct: float
    policy: LaunchPhasePolicy

    guards: tuple[GuardCheckpoint, ...] = field(default_factory=tuple)

    @property
    def records(self) -> list[dict]:
        """Строки в порядке колонок выходной записи."""
        return [row.to_record() for row in self.rows]


# =============================================================================
# FACTORIES
# =============================================================================


def build_lattice(params: ScheduleParams) -> PriceLattice:
    bins, end_price = params.lattice_sizing()
    return PriceLattice(
        p0=params.p0,
        bin_step_bps=params.bin_step_bps,
        bins=bins,
        end_price=end_price,
    )


def build_allocator(params: ScheduleParams, lattice: PriceLattice) -> Allocator:
    """
    Аллокатор выбранного режима.

    Raises:
        DomainError: Если параметры нарушают предусловия аллокатора
    """
    if params.mode is AllocationMode.GEOMETRIC:
        return GeometricAllocator(
            lattice,
            theta=params.theta,
            target_supply=params.target_supply,
            r0=params.r0,
        )
    return LogisticAllocator(
        lattice,
        p_min=params.p_min,
        p_max=params.p_max,
        k=params.k,
        s_mid=params.s_mid,
    )


def augment_schedule(
    schedule: AllocationSchedule,
    fee: FeeBreakdown,
    surcharge_pct: float,
) -> tuple[ScheduleRow, ...]:
    """
    Расписание + комиссии + surcharge.

    Surcharge не входит в cap комиссии:
        fee_total_plus_surcharge = fee_total + surcharge_pct / 100
    """
    total_plus = fee.fee_total + pct_to_fraction(surcharge_pct)
    return tuple(
        ScheduleRow(
            bin=row.bin,
            price=row.price,
            delta_x=row.delta_x,
            supply_cum=row.supply_cum,
            revenue_bin=row.revenue_bin,
            revenue_cum=row.revenue_cum,
            fee_base=fee.fee_base,
            fee_var=fee.fee_var,
            fee_total=fee.fee_total,
            surcharge_launch_pct=surcharge_pct,
            fee_total_plus_surcharge=total_plus,
        )
        for row in schedule.rows
    )


# =============================================================================
# BUILDER
# =============================================================================


class ScheduleBuilder:
    """Сборка расписания: аллокатор → верификация → комиссии и surcharge."""

    def __init__(self, verifier: ScheduleVerifier | None = None):
        """
        Args:
            verifier: верификатор (опционально, иначе из params.rel_tol)
        """
        self._verifier = verifier

    def run(
        self,
        params: ScheduleParams,
        policy: Optional[LaunchPhasePolicy] = None,
    ) -> ScheduleResult:
        """Полный запуск по параметрам.

        Args:
            params: Параметры запуска
            policy: Готовая launch-политика (иначе строится из params)

        Raises:
            DomainError: Нарушение математического предусловия в любом компоненте
            FileNotFoundError: allowlist_path задан, но файла нет
        """
        lattice = build_lattice(params)
        allocator = build_allocator(params, lattice)
        schedule = allocator.build_schedule()

        verifier = self._verifier or ScheduleVerifier(params.verifier_config())
        report = verifier.verify(schedule)

        fee = params.build_fee_model().breakdown(params.vol_accum)
        policy = policy or params.build_policy()
        surcharge = policy.surcharge_pct(params.identifier, params.elapsed_secs)

        rows = augment_schedule(schedule, fee, surcharge)

        guards: tuple[GuardCheckpoint, ...] = ()
        if params.price_guard_bps is not None:
            guards = tuple(guard_checkpoints(schedule, params.price_guard_bps))

        logger.info(
            "[%s] bins=%d supply=%.6f revenue=%.6f fee_total=%.6f%s surcharge=%.2f%%",
            allocator.name,
            schedule.bins,
            schedule.total_supply,
            schedule.total_revenue,
            fee.fee_total,
            " (capped)" if fee.capped else "",
            surcharge,
        )

        return ScheduleResult(
            params=params,
            allocator=allocator,
            schedule=schedule,
            report=report,
            rows=rows,
            fee=fee,
            surcharge_pct=surcharge,
            policy=policy,
            guards=guards,
        )


def build_schedule(params: ScheduleParams) -> ScheduleResult:
    """Запуск с default верификатором."""
    return ScheduleBuilder().run(params)
