"""
Unit tests для Pydantic моделей расписания

Проверка:
- AllocationSchedule.from_deltas: кумулятивы и выручка
- Immutability (frozen=True)
- Ограничения полей ScheduleRow
- Порядок колонок выходной записи
"""

import pytest
from pydantic import ValidationError

from src.core.domain import (
    SCHEDULE_COLUMNS,
    AllocationMode,
    AllocationRow,
    AllocationSchedule,
    ScheduleRow,
)

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def schedule() -> AllocationSchedule:
    return AllocationSchedule.from_deltas(
        mode=AllocationMode.GEOMETRIC,
        prices=[1.0, 2.0, 4.0],
        deltas=[10.0, 5.0, 2.5],
        closed_form_supply=17.5,
    )


@pytest.fixture
def valid_row_data() -> dict:
    return {
        "bin": 0,
        "price": 0.01,
        "delta_x": 100.0,
        "supply_cum": 100.0,
        "revenue_bin": 1.0,
        "revenue_cum": 1.0,
        "fee_base": 0.002,
        "fee_var": 0.00005,
        "fee_total": 0.00205,
        "surcharge_launch_pct": 50.0,
        "fee_total_plus_surcharge": 0.50205,
    }


# =============================================================================
# ALLOCATION SCHEDULE
# =============================================================================


class TestAllocationSchedule:
    """Тесты AllocationSchedule"""

    def test_cumulatives(self, schedule: AllocationSchedule) -> None:
        assert [row.supply_cum for row in schedule.rows] == [10.0, 15.0, 17.5]
        assert [row.revenue_bin for row in schedule.rows] == [10.0, 10.0, 10.0]
        assert [row.revenue_cum for row in schedule.rows] == [10.0, 20.0, 30.0]
        assert [row.bin for row in schedule.rows] == [0, 1, 2]

    def test_properties(self, schedule: AllocationSchedule) -> None:
        assert schedule.bins == 3
        assert schedule.prices == [1.0, 2.0, 4.0]
        assert schedule.deltas == [10.0, 5.0, 2.5]
        assert schedule.total_supply == 17.5
        assert schedule.total_revenue == 30.0
        assert schedule.closed_form_supply == 17.5

    def test_length_mismatch(self) -> None:
        with pytest.raises(ValueError, match="length mismatch"):
            AllocationSchedule.from_deltas(
                mode=AllocationMode.LOGISTIC,
                prices=[1.0, 2.0],
                deltas=[1.0],
                closed_form_supply=1.0,
            )

    def test_empty_schedule_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AllocationSchedule(mode=AllocationMode.GEOMETRIC, rows=(), closed_form_supply=0.0)

    def test_frozen(self, schedule: AllocationSchedule) -> None:
        with pytest.raises(ValidationError):
            schedule.closed_form_supply = 0.0  # type: ignore
        with pytest.raises(ValidationError):
            schedule.rows[0].delta_x = 0.0  # type: ignore

    def test_negative_delta_representable(self) -> None:
        """Отрицательный ΔX допустим в модели: его ловит верификатор"""
        row = AllocationRow(
            bin=0, price=1.0, delta_x=-1.0, supply_cum=-1.0, revenue_bin=-1.0, revenue_cum=-1.0
        )
        assert row.delta_x == -1.0

    def test_price_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            AllocationRow(
                bin=0, price=0.0, delta_x=1.0, supply_cum=1.0, revenue_bin=0.0, revenue_cum=0.0
            )


# =============================================================================
# SCHEDULE ROW
# =============================================================================


class TestScheduleRow:
    """Тесты ScheduleRow"""

    def test_valid(self, valid_row_data: dict) -> None:
        row = ScheduleRow(**valid_row_data)
        assert row.fee_total_plus_surcharge == pytest.approx(
            row.fee_total + row.surcharge_launch_pct / 100
        )

    def test_to_record_column_order(self, valid_row_data: dict) -> None:
        record = ScheduleRow(**valid_row_data).to_record()
        assert tuple(record) == SCHEDULE_COLUMNS
        assert record == valid_row_data

    @pytest.mark.parametrize(
        "field,value",
        [
            ("fee_total", 1.5),
            ("fee_total", -0.1),
            ("fee_base", -0.001),
            ("surcharge_launch_pct", -1.0),
            ("bin", -1),
        ],
    )
    def test_constraints(self, valid_row_data: dict, field: str, value: float) -> None:
        valid_row_data[field] = value
        with pytest.raises(ValidationError):
            ScheduleRow(**valid_row_data)

    def test_columns(self) -> None:
        assert len(SCHEDULE_COLUMNS) == 11
        assert SCHEDULE_COLUMNS[0] == "bin"
        assert SCHEDULE_COLUMNS[-1] == "fee_total_plus_surcharge"
