"""
CSV Export — запись расписания в schedule.csv

Формат файла:
    # metadata строки (режим, параметры закона, политика, guard, верификация)
    <пустая строка>
    ровно одна строка заголовка (SCHEDULE_COLUMNS)
    по одной строке на бин
"""

import csv
import logging
from pathlib import Path
from typing import Final

from src.core.contracts.validators import validate_schedule_rows
from src.core.domain.schedule import SCHEDULE_COLUMNS
from src.curves.geometric import GeometricAllocator
from src.curves.logistic import LogisticAllocator
from src.pipeline.schedule_builder import ScheduleResult

logger = logging.getLogger(__name__)

SCHEDULE_FILENAME: Final[str] = "schedule.csv"


def render_metadata(result: ScheduleResult) -> list[str]:
    """Metadata строки (без префикса '# ')."""
    params = result.params
    allocator = result.allocator
    lines = ["DLMM Bonding Curve Schedule"]

    if isinstance(allocator, GeometricAllocator):
        lines.append(
            f"Mode: Geometric, θ={allocator.theta}, R₀={allocator.implied_r0:.12g}, "
            f"law={allocator.law.value}"
        )
        lines.append(
            f"Growth factor g={allocator.g:.12f}, Decay factor r={allocator.r:.12f}"
        )
    elif isinstance(allocator, LogisticAllocator):
        lines.append(
            f"Mode: {allocator.name}, p_min={allocator.p_min}, p_max={allocator.p_max}, "
            f"k={allocator.k}, s_mid={allocator.s_mid:.6f}"
        )
        if allocator.truncated:
            lines.append(f"Lattice truncated at p_max after {allocator.bins} bins")

    lines.append(f"Volatility accumulator: {params.vol_accum}")
    lines.append(f"Total supply: {result.schedule.total_supply:.6f}")

    policy = result.policy
    lines.append(f"Launch policy: allowlist={len(policy.allowlist)} addresses")
    lines.append(
        f"Surcharge ramp: {policy.tau_start_pct:.1f}% → {policy.tau_end_pct:.1f}% "
        f"over {policy.ramp_secs:.0f}s ({policy.decay.name})"
    )

    for guard in result.guards:
        lines.append(f"Guard @ {guard.label} (bin {guard.bin}, P={guard.price:.12f}):")
        lines.append(f"  Min X→Y: {guard.base_to_quote.p_bound:.12f}")
        lines.append(f"  Min Y→X: {guard.quote_to_base.p_bound:.12f}")

    lines.append(f"Verification: {result.report.summary()}")
    return lines


def write_schedule_csv(result: ScheduleResult, out_dir: str | Path) -> Path:
    """
    Запись schedule.csv в out_dir (каталог создаётся при необходимости).

    Все строки проверяются контрактом schedule_row до открытия файла:
    невалидное расписание не оставляет частично записанного CSV.

    Returns:
        Путь к записанному файлу

    Raises:
        jsonschema.ValidationError: Если строка нарушает контракт schedule_row
    """
    records = result.records
    validate_schedule_rows(records)

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / SCHEDULE_FILENAME

    with open(path, "w", encoding="utf-8", newline="") as f:
        for line in render_metadata(result):
            f.write(f"# {line}\n")
        f.write("\n")

        writer = csv.DictWriter(f, fieldnames=list(SCHEDULE_COLUMNS), lineterminator="\n")
        writer.writeheader()
        for record in records:
            writer.writerow(record)

    logger.info("wrote %d rows to %s", len(result.rows), path)
    return path
