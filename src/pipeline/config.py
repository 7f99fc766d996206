"""
ScheduleParams — параметры запуска движка расписаний

Immutable Pydantic модель, описывающая весь параметрический интерфейс
движка: режим, сетку, параметры аллокатора, комиссии, launch-политику и
price guard.

Разделение ответственности:
- Pydantic проверяет форму параметров (типы, взаимоисключающие опции,
  обязательные для режима поля) → ValidationError
- Математические предусловия (p0 > 0, p_min < p0 < p_max, ...) проверяют
  сами компоненты → DomainError
"""

import json
from pathlib import Path
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, Field, model_validator

from src.core.domain.schedule import AllocationMode
from src.core.math.price_lattice import DEFAULT_BINS
from src.dlmm.fee_model import DEFAULT_MAX_FEE_RATE, FeeModel
from src.dlmm.launch_policy import (
    DEFAULT_TAU_END_PCT,
    DEFAULT_TAU_RAMP_SECS,
    DEFAULT_TAU_START_PCT,
    CosineDecay,
    DecayCurve,
    ExponentialDecay,
    LaunchPhasePolicy,
    LinearDecay,
    load_allowlist,
)
from src.verification.schedule_verifier import DEFAULT_REL_TOL, VerifierConfig


# =============================================================================
# PARAMS MODEL
# =============================================================================


class ScheduleParams(BaseModel):
    """
    Параметры одного запуска.

    Сетка задаётся ровно одним из bins / end_price; если не задано ни одно,
    используется DEFAULT_BINS.
    """

    # Режим
    mode: AllocationMode = Field(AllocationMode.GEOMETRIC, description="geometric | logistic")

    # Сетка
    p0: float = Field(0.01, description="Цена бина 0")
    bin_step_bps: float = Field(10.0, description="Шаг бина (bps)")
    bins: Optional[int] = Field(None, description="Количество бинов")
    end_price: Optional[float] = Field(None, description="Конечная цена (альтернатива bins)")

    # Geometric
    theta: float = Field(0.6, description="Крутизна θ (рекомендуется 0 < θ < 1)")
    target_supply: Optional[float] = Field(None, description="Целевой суммарный supply S*")
    r0: Optional[float] = Field(None, description="Выручка бина 0 R0")

    # Logistic
    p_min: float = Field(0.0, description="Нижняя асимптота цены")
    p_max: Optional[float] = Field(None, description="Верхняя асимптота цены")
    k: float = Field(1e-5, description="Крутизна логистики")
    s_mid: float = Field(0.0, description="Supply в середине кривой (0 → auto)")

    # Комиссии
    base_factor: float = Field(0.0, description="B")
    variable_fee_control: float = Field(0.0, description="A")
    vol_accum: float = Field(0.0, description="Volatility accumulator v_a")
    max_fee_rate: float = Field(DEFAULT_MAX_FEE_RATE, description="Cap комиссии (дробь)")

    # Launch policy
    allowlist_path: Optional[Path] = Field(None, description="Файл allowlist")
    tau_start_pct: float = Field(DEFAULT_TAU_START_PCT)
    tau_end_pct: float = Field(DEFAULT_TAU_END_PCT)
    tau_ramp_secs: float = Field(DEFAULT_TAU_RAMP_SECS)
    tau_decay: Literal["linear", "exponential", "cosine"] = Field("linear")
    tau_decay_rate: float = Field(5.0, description="λ для exponential decay")
    elapsed_secs: float = Field(0.0, ge=0, description="Время с запуска для surcharge")
    identifier: Optional[str] = Field(None, description="Участник для surcharge")

    # Price guard
    price_guard_bps: Optional[float] = Field(None, description="Допустимый impact (bps)")

    # Верификация
    rel_tol: float = Field(DEFAULT_REL_TOL, ge=0, description="Относительный допуск сверки")

    model_config = {"frozen": True, "allow_inf_nan": False}

    @model_validator(mode="after")
    def validate_surface(self) -> "ScheduleParams":
        """Взаимоисключающие опции и обязательные поля режима."""
        if self.bins is not None and self.end_price is not None:
            raise ValueError("bins and end_price are mutually exclusive")

        if self.mode is AllocationMode.GEOMETRIC:
            if self.target_supply is None and self.r0 is None:
                raise ValueError("geometric: need r0 or target_supply")
            if self.target_supply is not None and self.r0 is not None:
                raise ValueError("geometric: r0 and target_supply are mutually exclusive")
        else:
            if self.p_max is None:
                raise ValueError("logistic: need p_max")
        return self

    # -------------------------------------------------------------------------
    # Загрузка
    # -------------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ScheduleParams":
        return cls.model_validate(dict(data))

    @classmethod
    def from_json(cls, text: str) -> "ScheduleParams":
        return cls.model_validate(json.loads(text))

    @classmethod
    def from_json_file(cls, path: str | Path) -> "ScheduleParams":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_json(f.read())

    # -------------------------------------------------------------------------
    # Фабрики компонентов
    # -------------------------------------------------------------------------

    def lattice_sizing(self) -> tuple[Optional[int], Optional[float]]:
        """(bins, end_price) для PriceLattice с учётом default."""
        if self.bins is None and self.end_price is None:
            return DEFAULT_BINS, None
        return self.bins, self.end_price

    def decay_curve(self) -> DecayCurve:
        if self.tau_decay == "exponential":
            return ExponentialDecay(rate=self.tau_decay_rate)
        if self.tau_decay == "cosine":
            return CosineDecay()
        return LinearDecay()

    def build_policy(self) -> LaunchPhasePolicy:
        """
        LaunchPhasePolicy с allowlist из файла (если задан).

        Raises:
            FileNotFoundError: Если allowlist_path задан, но файла нет
        """
        allowlist = load_allowlist(self.allowlist_path) if self.allowlist_path else ()
        return LaunchPhasePolicy(
            allowlist=allowlist,
            tau_start_pct=self.tau_start_pct,
            tau_end_pct=self.tau_end_pct,
            ramp_secs=self.tau_ramp_secs,
            decay=self.decay_curve(),
        )

    def build_fee_model(self) -> FeeModel:
        return FeeModel(
            base_factor=self.base_factor,
            variable_fee_control=self.variable_fee_control,
            max_fee_rate=self.max_fee_rate,
            bin_step_bps=self.bin_step_bps,
        )

    def verifier_config(self) -> VerifierConfig:
        return VerifierConfig(rel_tol=self.rel_tol)
