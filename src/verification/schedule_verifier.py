"""ScheduleVerifier — сверка численной суммы расписания с closed-form

Проверяет:
- S_numeric (компенсированная сумма ΔX_i) против S_closed аллокатора
  под относительным допуском rel_tol
- Строгую монотонность цен P_i < P_{i+1}
- Неотрицательность ΔX_i

Результат — VerificationReport. Провал сверки НЕ фатален: расписание всё
равно выдаётся, severity = TOLERANCE_MISMATCH, а caller решает, продолжать
с предупреждением или прервать (report.raise_for_severity()).
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Optional

from src.core.domain.schedule import AllocationSchedule
from src.core.exceptions import DomainError, ToleranceMismatch
from src.core.math.compensated_sum import compensated_sum
from src.core.math.numerical_safeguards import relative_error

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Относительный допуск сверки по умолчанию
DEFAULT_REL_TOL: Final[float] = 1e-9

# Допустимые границы настройки допуска
REL_TOL_MIN: Final[float] = 0.0
REL_TOL_MAX: Final[float] = 1e-2


# =============================================================================
# ENUMS
# =============================================================================


class Severity(str, Enum):
    """Серьёзность результата верификации"""

    OK = "OK"
    TOLERANCE_MISMATCH = "TOLERANCE_MISMATCH"


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class VerifierConfig:
    """Конфигурация ScheduleVerifier."""

    rel_tol: float = DEFAULT_REL_TOL

    def __post_init__(self) -> None:
        if not math.isfinite(self.rel_tol) or not (
            REL_TOL_MIN <= self.rel_tol <= REL_TOL_MAX
        ):
            raise DomainError(
                f"{REL_TOL_MIN} <= rel_tol <= {REL_TOL_MAX}", rel_tol=self.rel_tol
            )


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class VerificationReport:
    """Результат верификации расписания."""

    closed_form_value: float
    numeric_value: float
    absolute_error: float
    relative_error: float
    tolerance: float

    within_tolerance: bool
    monotonic: bool
    non_negative: bool

    bins: int

    # Диагностика
    issues: tuple[str, ...] = field(default_factory=tuple)

    @property
    def passed(self) -> bool:
        return self.within_tolerance and self.monotonic and self.non_negative

    @property
    def severity(self) -> Severity:
        return Severity.OK if self.passed else Severity.TOLERANCE_MISMATCH

    def raise_for_severity(self) -> None:
        """
        Явный opt-in для caller, который хочет прервать работу при провале.

        Raises:
            ToleranceMismatch: Если severity != OK
        """
        if not self.passed:
            raise ToleranceMismatch(
                "schedule verification failed: " + "; ".join(self.issues),
                issues=list(self.issues),
            )

    def to_dict(self) -> dict:
        """Dict, совместимый с contracts/schema/verification_report.json."""
        return {
            "closed_form_value": self.closed_form_value,
            "numeric_value": self.numeric_value,
            "absolute_error": self.absolute_error,
            "relative_error": self.relative_error,
            "tolerance": self.tolerance,
            "within_tolerance": self.within_tolerance,
            "monotonic": self.monotonic,
            "non_negative": self.non_negative,
            "bins": self.bins,
            "severity": self.severity.value,
            "issues": list(self.issues),
        }

    def summary(self) -> str:
        return (
            f"bins={self.bins} sumS={self.numeric_value:.6f} "
            f"closed={self.closed_form_value:.6f} rel_err={self.relative_error:.3e} "
            f"monotone={self.monotonic} non_negative={self.non_negative} "
            f"severity={self.severity.value}"
        )


# =============================================================================
# VERIFIER
# =============================================================================


class ScheduleVerifier:
    """Сверка расписания: closed-form vs численная сумма + структурные проверки.

    Порядок проверок:
    1. Проход по бинам: компенсированная сумма ΔX_i, монотонность цен,
       неотрицательность ΔX_i
    2. Сравнение S_numeric с S_closed под rel_tol
    """

    def __init__(self, config: VerifierConfig | None = None):
        """Инициализация верификатора.

        Args:
            config: конфигурация (опционально, используется default)
        """
        self.config = config or VerifierConfig()

    def verify(
        self,
        schedule: AllocationSchedule,
        closed_form: Optional[float] = None,
    ) -> VerificationReport:
        """Верификация расписания.

        Args:
            schedule: Расписание от аллокатора
            closed_form: Closed-form прогноз (default: schedule.closed_form_supply)

        Returns:
            VerificationReport (никогда не бросает на провале сверки)
        """
        s_closed = schedule.closed_form_supply if closed_form is None else closed_form
        issues: list[str] = []

        prev_price = -math.inf
        monotonic = True
        non_negative = True

        for row in schedule.rows:
            if row.price <= prev_price:
                if monotonic:
                    issues.append(
                        f"price not strictly increasing at bin {row.bin}: "
                        f"P={row.price!r} <= previous {prev_price!r}"
                    )
                monotonic = False
            prev_price = row.price

            if not row.delta_x >= 0.0:
                if non_negative:
                    issues.append(f"negative allocation at bin {row.bin}: {row.delta_x!r}")
                non_negative = False

        s_numeric = compensated_sum(schedule.deltas)
        abs_err = abs(s_numeric - s_closed)
        rel_err = relative_error(s_numeric, s_closed)
        within = math.isfinite(rel_err) and rel_err <= self.config.rel_tol
        if not within:
            issues.append(
                f"closed form {s_closed!r} vs numeric {s_numeric!r}: "
                f"rel_err={rel_err:.3e} > tol={self.config.rel_tol:.1e}"
            )

        report = VerificationReport(
            closed_form_value=s_closed,
            numeric_value=s_numeric,
            absolute_error=abs_err,
            relative_error=rel_err,
            tolerance=self.config.rel_tol,
            within_tolerance=within,
            monotonic=monotonic,
            non_negative=non_negative,
            bins=schedule.bins,
            issues=tuple(issues),
        )

        if report.passed:
            logger.info("[%s] verification ok: %s", schedule.mode.value, report.summary())
        else:
            logger.warning(
                "[%s] verification mismatch: %s", schedule.mode.value, "; ".join(issues)
            )
        return report
