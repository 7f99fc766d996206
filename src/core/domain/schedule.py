"""
AllocationSchedule — Модель расписания аллокаций по бинам

Immutable Pydantic модели:
- AllocationRow: одна строка расписания (бин, цена, ΔX, кумулятивы)
- AllocationSchedule: упорядоченное расписание + closed-form прогноз аллокатора
- ScheduleRow: выходная запись (расписание + комиссии + surcharge)

Полная совместимость с JSON Schema (contracts/schema/schedule_row.json).

Инварианты расписания:
    supply_cum_i  = Σ_{j<=i} delta_x_j      (компенсированная сумма)
    revenue_bin_i = delta_x_i * P_i
    revenue_cum_i = Σ_{j<=i} revenue_bin_j  (компенсированная сумма)
"""

from enum import Enum
from typing import Final, Sequence

from pydantic import BaseModel, Field

from src.core.math.compensated_sum import compensated_prefix_sums


# =============================================================================
# CONSTANTS
# =============================================================================

# Порядок колонок выходной записи
SCHEDULE_COLUMNS: Final[tuple[str, ...]] = (
    "bin",
    "price",
    "delta_x",
    "supply_cum",
    "revenue_bin",
    "revenue_cum",
    "fee_base",
    "fee_var",
    "fee_total",
    "surcharge_launch_pct",
    "fee_total_plus_surcharge",
)


# =============================================================================
# ENUMS
# =============================================================================


class AllocationMode(str, Enum):
    """Режим аллокации"""

    GEOMETRIC = "geometric"
    LOGISTIC = "logistic"


# =============================================================================
# SCHEDULE
# =============================================================================


class AllocationRow(BaseModel):
    """
    Строка расписания.

    delta_x не ограничен снизу на уровне модели: неотрицательность
    проверяется ScheduleVerifier и попадает в отчёт.
    """

    bin: int = Field(..., ge=0, description="Индекс бина")
    price: float = Field(..., gt=0, description="Нижняя цена бина P_i")
    delta_x: float = Field(..., description="Токены, выделенные бину")
    supply_cum: float = Field(..., description="Кумулятивный supply")
    revenue_bin: float = Field(..., description="Выручка бина delta_x * P_i")
    revenue_cum: float = Field(..., description="Кумулятивная выручка")

    model_config = {"frozen": True}


class AllocationSchedule(BaseModel):
    """
    Расписание аллокаций, созданное ровно одним аллокатором.

    Immutable модель (frozen=True): после создания не изменяется,
    потребляется ScheduleVerifier и FeeModel.
    """

    mode: AllocationMode = Field(..., description="Режим аллокатора")
    rows: tuple[AllocationRow, ...] = Field(..., min_length=1)
    closed_form_supply: float = Field(
        ..., description="Closed-form прогноз суммарного supply от аллокатора"
    )

    model_config = {"frozen": True}

    @classmethod
    def from_deltas(
        cls,
        mode: AllocationMode,
        prices: Sequence[float],
        deltas: Sequence[float],
        closed_form_supply: float,
    ) -> "AllocationSchedule":
        """
        Построение расписания из цен и ΔX с компенсированными префикс-суммами.

        Args:
            mode: Режим аллокатора
            prices: Нижние цены бинов P_0..P_{n-1}
            deltas: ΔX_0..ΔX_{n-1}
            closed_form_supply: Closed-form прогноз суммарного supply

        Raises:
            ValueError: Если длины prices и deltas не совпадают
        """
        if len(prices) != len(deltas):
            raise ValueError(
                f"prices/deltas length mismatch: {len(prices)} != {len(deltas)}"
            )

        revenue_bins = [dx * p for p, dx in zip(prices, deltas)]
        supply_cum = compensated_prefix_sums(deltas)
        revenue_cum = compensated_prefix_sums(revenue_bins)

        rows = tuple(
            AllocationRow(
                bin=i,
                price=prices[i],
                delta_x=deltas[i],
                supply_cum=supply_cum[i],
                revenue_bin=revenue_bins[i],
                revenue_cum=revenue_cum[i],
            )
            for i in range(len(deltas))
        )

        return cls(mode=mode, rows=rows, closed_form_supply=closed_form_supply)

    @property
    def bins(self) -> int:
        return len(self.rows)

    @property
    def prices(self) -> list[float]:
        return [row.price for row in self.rows]

    @property
    def deltas(self) -> list[float]:
        return [row.delta_x for row in self.rows]

    @property
    def total_supply(self) -> float:
        """Последний supply_cum."""
        return self.rows[-1].supply_cum

    @property
    def total_revenue(self) -> float:
        """Последний revenue_cum."""
        return self.rows[-1].revenue_cum


# =============================================================================
# OUTPUT RECORD
# =============================================================================


class ScheduleRow(BaseModel):
    """
    Выходная запись расписания.

    Все числовые колонки в decimal-space (дроби или токены), не fixed-point.
    surcharge_launch_pct в процентах; fee_total_plus_surcharge — дробь:
        fee_total_plus_surcharge = fee_total + surcharge_launch_pct / 100
    """

    bin: int = Field(..., ge=0)
    price: float = Field(..., gt=0)
    delta_x: float
    supply_cum: float
    revenue_bin: float
    revenue_cum: float
    fee_base: float = Field(..., ge=0)
    fee_var: float = Field(..., ge=0)
    fee_total: float = Field(..., ge=0, le=1)
    surcharge_launch_pct: float = Field(..., ge=0)
    fee_total_plus_surcharge: float = Field(..., ge=0)

    model_config = {"frozen": True}

    def to_record(self) -> dict[str, float | int]:
        """Dict в порядке SCHEDULE_COLUMNS."""
        return {name: getattr(self, name) for name in SCHEDULE_COLUMNS}
