"""
Contract Validation Module

Модуль для валидации JSON контрактов выходных записей движка.
"""

from .validators import (
    ContractValidator,
    SchemaLoader,
    ScheduleRowValidator,
    VerificationReportValidator,
    validate_schedule_row,
    validate_schedule_rows,
    validate_verification_report,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ScheduleRowValidator",
    "VerificationReportValidator",
    # Functions
    "validate_schedule_row",
    "validate_schedule_rows",
    "validate_verification_report",
]
