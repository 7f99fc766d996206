"""
Domain models and value objects.

Contains schedule records: AllocationRow, AllocationSchedule, ScheduleRow.
"""

from src.core.domain.schedule import (
    SCHEDULE_COLUMNS,
    AllocationMode,
    AllocationRow,
    AllocationSchedule,
    ScheduleRow,
)

__all__ = [
    "SCHEDULE_COLUMNS",
    "AllocationMode",
    "AllocationRow",
    "AllocationSchedule",
    "ScheduleRow",
]
