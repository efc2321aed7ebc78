from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...attendance.model import AttendanceCounts
from ...core.enums import FrequencyMode
from ..model import CompensationResult


class CompensationCalculator(ABC):
    """Calculator interface (Strategy Pattern for pay components)."""

    @abstractmethod
    def compute(
        self,
        base_amount: Decimal,
        mode: FrequencyMode,
        attendance: AttendanceCounts,
        working_days_in_month: int,
    ) -> CompensationResult:
        raise NotImplementedError
