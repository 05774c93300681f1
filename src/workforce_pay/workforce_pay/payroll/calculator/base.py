from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...core.enums import WeekDay


class EarningsCalculator(ABC):
    """Calculator interface (Strategy Pattern for earnings)."""

    @abstractmethod
    def monthly_working_days(self, working_days: Iterable[WeekDay], month: int, year: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def monthly_expected_hours(self, working_days: Iterable[WeekDay], daily_hours: float, month: int, year: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def hourly_rate(self, base_salary: float, expected_hours: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def earned_salary(self, valid_hours: float, expected_hours: float, base_salary: float) -> float:
        raise NotImplementedError
