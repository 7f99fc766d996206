"""Pipeline — параметры запуска, сборка и экспорт расписания."""

from .config import ScheduleParams
from .csv_export import SCHEDULE_FILENAME, render_metadata, write_schedule_csv
from .schedule_builder import (
    ScheduleBuilder,
    ScheduleResult,
    augment_schedule,
    build_allocator,
    build_lattice,
    build_schedule,
)

__all__ = [
    "ScheduleParams",
    "ScheduleBuilder",
    "ScheduleResult",
    "augment_schedule",
    "build_allocator",
    "build_lattice",
    "build_schedule",
    "SCHEDULE_FILENAME",
    "render_metadata",
    "write_schedule_csv",
]
