"""Allocator — общий интерфейс аллокаторов на сетке цен DLMM.

Аллокатор отвечает на три вопроса:
- сколько бинов попадает в расписание (bins)
- сколько токенов выделено бину i (delta_x)
- какой суммарный supply даёт closed-form формула (closed_form_supply)

build_schedule() собирает AllocationSchedule с компенсированными кумулятивами.
"""

from abc import ABC, abstractmethod

from src.core.domain.schedule import AllocationMode, AllocationSchedule
from src.core.math.price_lattice import PriceLattice


class Allocator(ABC):
    """Базовый класс аллокатора."""

    mode: AllocationMode
    name: str = "allocator"

    def __init__(self, lattice: PriceLattice):
        self.lattice = lattice

    @property
    @abstractmethod
    def bins(self) -> int:
        """Количество бинов в расписании."""

    @abstractmethod
    def delta_x(self, i: int) -> float:
        """Аллокация бина i."""

    @abstractmethod
    def closed_form_supply(self) -> float:
        """Суммарный supply по closed-form формуле."""

    def price_of_bin(self, i: int) -> float:
        return self.lattice.price(i)

    def deltas(self) -> list[float]:
        return [self.delta_x(i) for i in range(self.bins)]

    def build_schedule(self) -> AllocationSchedule:
        """Расписание по всем бинам аллокатора."""
        prices = [self.price_of_bin(i) for i in range(self.bins)]
        return AllocationSchedule.from_deltas(
            mode=self.mode,
            prices=prices,
            deltas=self.deltas(),
            closed_form_supply=self.closed_form_supply(),
        )
