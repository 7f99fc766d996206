"""
Тесты для ScheduleVerifier

Проверяемые инварианты:
1. Сверка closed-form vs численная сумма под rel_tol
2. Немонотонные цены и отрицательные ΔX попадают в отчёт
3. Провал сверки не фатален: verify() не бросает, severity = TOLERANCE_MISMATCH
4. raise_for_severity() — явный opt-in для ToleranceMismatch
"""

import logging

import pytest

from src.core.domain.schedule import AllocationMode, AllocationSchedule
from src.core.exceptions import DomainError, ToleranceMismatch
from src.verification.schedule_verifier import (
    DEFAULT_REL_TOL,
    ScheduleVerifier,
    Severity,
    VerificationReport,
    VerifierConfig,
)

# =============================================================================
# HELPERS
# =============================================================================


def make_schedule(
    prices: list[float],
    deltas: list[float],
    closed_form: float,
) -> AllocationSchedule:
    return AllocationSchedule.from_deltas(
        mode=AllocationMode.GEOMETRIC,
        prices=prices,
        deltas=deltas,
        closed_form_supply=closed_form,
    )


# =============================================================================
# CONFIG
# =============================================================================


class TestVerifierConfig:
    """Тесты VerifierConfig"""

    def test_default(self) -> None:
        assert VerifierConfig().rel_tol == DEFAULT_REL_TOL == 1e-9

    @pytest.mark.parametrize("rel_tol", [-1e-9, 0.5, float("nan")])
    def test_invalid_rel_tol(self, rel_tol: float) -> None:
        with pytest.raises(DomainError, match="rel_tol"):
            VerifierConfig(rel_tol=rel_tol)

    def test_frozen(self) -> None:
        config = VerifierConfig()
        with pytest.raises(AttributeError):
            config.rel_tol = 1e-3  # type: ignore


# =============================================================================
# VERIFY
# =============================================================================


class TestVerify:
    """Тесты ScheduleVerifier.verify"""

    def test_consistent_schedule_passes(self) -> None:
        schedule = make_schedule([1.0, 1.1, 1.21], [3.0, 2.0, 1.0], closed_form=6.0)
        report = ScheduleVerifier().verify(schedule)

        assert report.passed
        assert report.severity is Severity.OK
        assert report.numeric_value == 6.0
        assert report.absolute_error == 0.0
        assert report.relative_error == 0.0
        assert report.bins == 3
        assert report.issues == ()
        report.raise_for_severity()

    def test_tolerance_mismatch_is_not_fatal(self) -> None:
        schedule = make_schedule([1.0, 2.0], [1.0, 2.0], closed_form=10.0)
        report = ScheduleVerifier().verify(schedule)

        assert not report.within_tolerance
        assert report.monotonic and report.non_negative
        assert report.severity is Severity.TOLERANCE_MISMATCH
        assert report.relative_error == pytest.approx(0.7)
        assert any("rel_err=" in issue for issue in report.issues)

    def test_raise_for_severity(self) -> None:
        schedule = make_schedule([1.0, 2.0], [1.0, 2.0], closed_form=10.0)
        report = ScheduleVerifier().verify(schedule)

        with pytest.raises(ToleranceMismatch, match="schedule verification failed") as exc:
            report.raise_for_severity()
        assert exc.value.issues == list(report.issues)
        assert isinstance(exc.value, ArithmeticError)

    def test_non_monotonic_prices(self) -> None:
        schedule = make_schedule([1.0, 1.0, 2.0], [1.0, 1.0, 1.0], closed_form=3.0)
        report = ScheduleVerifier().verify(schedule)

        assert report.within_tolerance
        assert not report.monotonic
        assert report.severity is Severity.TOLERANCE_MISMATCH
        assert "price not strictly increasing at bin 1" in report.issues[0]

    def test_negative_allocation(self) -> None:
        schedule = make_schedule([1.0, 2.0, 3.0], [1.0, -0.5, 1.0], closed_form=1.5)
        report = ScheduleVerifier().verify(schedule)

        assert report.within_tolerance
        assert not report.non_negative
        assert report.issues == ("negative allocation at bin 1: -0.5",)

    def test_looser_tolerance(self) -> None:
        schedule = make_schedule([1.0, 2.0], [1.0, 1.0], closed_form=2.0001)
        assert not ScheduleVerifier().verify(schedule).passed
        assert ScheduleVerifier(VerifierConfig(rel_tol=1e-3)).verify(schedule).passed

    def test_closed_form_override(self) -> None:
        schedule = make_schedule([1.0, 2.0], [1.0, 1.0], closed_form=99.0)
        report = ScheduleVerifier().verify(schedule, closed_form=2.0)
        assert report.passed
        assert report.closed_form_value == 2.0

    def test_logging(self, caplog) -> None:
        with caplog.at_level(logging.INFO):
            ScheduleVerifier().verify(make_schedule([1.0], [1.0], closed_form=1.0))
            ScheduleVerifier().verify(make_schedule([1.0], [1.0], closed_form=2.0))

        levels = [record.levelno for record in caplog.records]
        assert logging.INFO in levels
        assert logging.WARNING in levels
        assert "verification mismatch" in caplog.text


# =============================================================================
# REPORT
# =============================================================================


class TestVerificationReport:
    """Тесты VerificationReport"""

    def test_to_dict(self) -> None:
        schedule = make_schedule([1.0, 2.0], [1.0, 1.0], closed_form=3.0)
        data = ScheduleVerifier().verify(schedule).to_dict()

        assert data["severity"] == "TOLERANCE_MISMATCH"
        assert data["bins"] == 2
        assert isinstance(data["issues"], list)

    def test_summary(self) -> None:
        report = VerificationReport(
            closed_form_value=1.0,
            numeric_value=1.0,
            absolute_error=0.0,
            relative_error=0.0,
            tolerance=1e-9,
            within_tolerance=True,
            monotonic=True,
            non_negative=True,
            bins=1,
        )
        assert "severity=OK" in report.summary()
        assert "bins=1" in report.summary()
