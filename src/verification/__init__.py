"""Verification — сверка расписаний аллокаций."""

from .schedule_verifier import (
    DEFAULT_REL_TOL,
    ScheduleVerifier,
    Severity,
    VerificationReport,
    VerifierConfig,
)

__all__ = [
    "DEFAULT_REL_TOL",
    "ScheduleVerifier",
    "Severity",
    "VerificationReport",
    "VerifierConfig",
]
