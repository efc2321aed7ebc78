from __future__ import annotations

from typing import Optional, Protocol


class WorkingCalendar(Protocol):
    """Supplies the number of official working days of a month."""

    def working_days(self, *, year: int, month: int) -> Optional[int]:
        raise NotImplementedError

    def set_working_days(self, *, year: int, month: int, working_days: int) -> None:
        raise NotImplementedError
