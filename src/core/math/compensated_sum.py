"""
Compensated Summation — сумма Ноймайера (улучшенный Kahan)

Накопитель хранит running total и отдельный корректирующий член, в который
на каждом шаге возвращаются потерянные младшие биты. Результат = total + comp.

Используется для:
- supply_cum / revenue_cum в расписании
- S_numeric в ScheduleVerifier

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Порядок сложения сохраняется (prefix-sum зависимость)
2. Результат детерминирован для одной и той же последовательности
"""

from typing import Iterable


class NeumaierAccumulator:
    """
    Running-сумма с компенсацией ошибки округления.

    Examples:
        >>> acc = NeumaierAccumulator()
        >>> for x in [1.0, 1e100, 1.0, -1e100]:
        ...     _ = acc.add(x)
        >>> acc.value
        2.0
    """

    __slots__ = ("_total", "_comp", "_count")

    def __init__(self) -> None:
        self._total = 0.0
        self._comp = 0.0
        self._count = 0

    def add(self, x: float) -> float:
        """
        Добавление слагаемого.

        Returns:
            Текущее компенсированное значение суммы (total + comp)
        """
        t = self._total + x
        if abs(self._total) >= abs(x):
            # младшие биты x потеряны
            self._comp += (self._total - t) + x
        else:
            # младшие биты total потеряны
            self._comp += (x - t) + self._total
        self._total = t
        self._count += 1
        return self._total + self._comp

    @property
    def value(self) -> float:
        """Компенсированная сумма."""
        return self._total + self._comp

    @property
    def correction(self) -> float:
        """Накопленный корректирующий член."""
        return self._comp

    @property
    def count(self) -> int:
        return self._count


def compensated_sum(values: Iterable[float]) -> float:
    """
    Компенсированная сумма последовательности.

    Examples:
        >>> compensated_sum([0.1] * 10)
        1.0
    """
    acc = NeumaierAccumulator()
    for x in values:
        acc.add(x)
    return acc.value


def compensated_prefix_sums(values: Iterable[float]) -> list[float]:
    """
    Компенсированные префиксные суммы (order-preserving).

    Examples:
        >>> compensated_prefix_sums([1.0, 2.0, 3.0])
        [1.0, 3.0, 6.0]
    """
    acc = NeumaierAccumulator()
    return [acc.add(x) for x in values]
