"""
LaunchPhasePolicy — allowlist + убывающий во времени surcharge (anti-sniping)

τ(t) для участников вне allowlist:
    t <= 0          → tau_start_pct
    t >= ramp_secs  → tau_end_pct
    между           → tau_end + (tau_start - tau_end) · w(t / ramp_secs)

w(x) — заменяемая стратегия затухания (DecayCurve), w(0) = 1, w(1) = 0,
монотонно убывает. По умолчанию линейная: w(x) = 1 - x.

Участники из allowlist полностью освобождены: surcharge = 0 при любом t.

Allowlist загружается один раз при создании политики: newline-separated
идентификаторы, пустые строки и комментарии '#' пропускаются, дубликаты
идемпотентны (set semantics).
"""

import logging
import math
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Iterable, Optional, Protocol

from src.core.exceptions import ConfigurationWarning
from src.core.math.numerical_safeguards import (
    validate_finite,
    validate_in_range,
    validate_positive,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_TAU_START_PCT: Final[float] = 50.0
DEFAULT_TAU_END_PCT: Final[float] = 3.0
DEFAULT_TAU_RAMP_SECS: Final[float] = 30.0


# =============================================================================
# DECAY CURVES
# =============================================================================


class DecayCurve(Protocol):
    """Стратегия затухания: вес стартового surcharge при прогрессе x ∈ [0, 1]."""

    name: str

    def weight(self, x: float) -> float: ...


@dataclass(frozen=True)
class LinearDecay:
    """w(x) = 1 - x."""

    name: str = "linear"

    def weight(self, x: float) -> float:
        return 1.0 - x


@dataclass(frozen=True)
class ExponentialDecay:
    """
    Нормированная экспонента: w(x) = (e^{-λx} - e^{-λ}) / (1 - e^{-λ}).

    Большой λ — быстрый спад в начале окна.
    """

    rate: float = 5.0
    name: str = "exponential"

    def __post_init__(self) -> None:
        validate_positive(self.rate, "rate")

    def weight(self, x: float) -> float:
        # e^{-λx} - e^{-λ} = expm1(-λx) - expm1(-λ)
        return (math.expm1(-self.rate * x) - math.expm1(-self.rate)) / -math.expm1(
            -self.rate
        )


@dataclass(frozen=True)
class CosineDecay:
    """w(x) = (1 + cos(πx)) / 2."""

    name: str = "cosine"

    def weight(self, x: float) -> float:
        return 0.5 * (1.0 + math.cos(math.pi * x))


# =============================================================================
# ALLOWLIST
# =============================================================================


def parse_allowlist(text: str) -> frozenset[str]:
    """
    Разбор newline-separated allowlist.

    Examples:
        >>> sorted(parse_allowlist("a\\n\\n# comment\\n b \\na\\n"))
        ['a', 'b']
    """
    entries = set()
    for line in text.splitlines():
        identifier = line.strip()
        if not identifier or identifier.startswith("#"):
            continue
        entries.add(identifier)
    return frozenset(entries)


def load_allowlist(path: str | Path) -> frozenset[str]:
    """
    Загрузка allowlist из файла.

    Raises:
        FileNotFoundError: Если файл не найден
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        allowlist = parse_allowlist(f.read())
    logger.info("loaded allowlist: %d identifiers from %s", len(allowlist), path)
    return allowlist


# =============================================================================
# POLICY
# =============================================================================


class LaunchPhasePolicy:
    """
    Политика launch-фазы: allowlist + τ(t).

    Immutable после создания: allowlist фиксируется при загрузке.
    """

    def __init__(
        self,
        allowlist: Iterable[str] = (),
        tau_start_pct: float = DEFAULT_TAU_START_PCT,
        tau_end_pct: float = DEFAULT_TAU_END_PCT,
        ramp_secs: float = DEFAULT_TAU_RAMP_SECS,
        decay: Optional[DecayCurve] = None,
    ):
        validate_in_range(tau_start_pct, "tau_start_pct", 0.0, 100.0)
        validate_in_range(tau_end_pct, "tau_end_pct", 0.0, 100.0)
        validate_positive(ramp_secs, "ramp_secs")

        if tau_start_pct < tau_end_pct:
            message = (
                f"tau_start_pct={tau_start_pct} < tau_end_pct={tau_end_pct}: "
                f"surcharge will grow during the launch window"
            )
            logger.warning(message)
            warnings.warn(message, ConfigurationWarning, stacklevel=2)

        self._allowlist = frozenset(allowlist)
        self._tau_start_pct = tau_start_pct
        self._tau_end_pct = tau_end_pct
        self._ramp_secs = ramp_secs
        self._decay = decay or LinearDecay()

    @classmethod
    def from_allowlist_file(
        cls,
        path: str | Path,
        **kwargs,
    ) -> "LaunchPhasePolicy":
        """Политика с allowlist, загруженным из файла."""
        return cls(allowlist=load_allowlist(path), **kwargs)

    # -------------------------------------------------------------------------
    # Свойства
    # -------------------------------------------------------------------------

    @property
    def allowlist(self) -> frozenset[str]:
        return self._allowlist

    @property
    def tau_start_pct(self) -> float:
        return self._tau_start_pct

    @property
    def tau_end_pct(self) -> float:
        return self._tau_end_pct

    @property
    def ramp_secs(self) -> float:
        return self._ramp_secs

    @property
    def decay(self) -> DecayCurve:
        return self._decay

    # -------------------------------------------------------------------------
    # Запросы
    # -------------------------------------------------------------------------

    def is_allowed(self, identifier: str) -> bool:
        """Точное (case-sensitive) членство в allowlist."""
        return identifier in self._allowlist

    def tau(self, t_elapsed_secs: float) -> float:
        """
        Surcharge (%) для участника вне allowlist через t секунд после запуска.

        Examples:
            >>> policy = LaunchPhasePolicy(tau_start_pct=50.0, tau_end_pct=5.0, ramp_secs=120.0)
            >>> policy.tau(0.0), policy.tau(60.0), policy.tau(120.0)
            (50.0, 27.5, 5.0)
        """
        validate_finite(t_elapsed_secs, "t_elapsed_secs")
        if t_elapsed_secs <= 0.0:
            return self._tau_start_pct
        if t_elapsed_secs >= self._ramp_secs:
            return self._tau_end_pct

        x = t_elapsed_secs / self._ramp_secs
        span = self._tau_start_pct - self._tau_end_pct
        return self._tau_end_pct + span * self._decay.weight(x)

    def surcharge_pct(self, identifier: Optional[str], t_elapsed_secs: float) -> float:
        """
        Surcharge (%) для конкретного участника.

        identifier=None — анонимный участник (не освобождён).
        """
        if identifier is not None and self.is_allowed(identifier):
            return 0.0
        return self.tau(t_elapsed_secs)

    def __repr__(self) -> str:
        return (
            f"LaunchPhasePolicy(allowlist={len(self._allowlist)}, "
            f"tau={self._tau_start_pct}%→{self._tau_end_pct}% over {self._ramp_secs}s, "
            f"decay={self._decay.name})"
        )
