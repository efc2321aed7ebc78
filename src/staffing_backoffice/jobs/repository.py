from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Job


class JobRepository(Protocol):
    """Read access to jobs; every list is ordered by ascending job id."""

    def get_by_id(self, job_id: int) -> Optional[Job]:
        raise NotImplementedError

    def list_by_ids(self, job_ids: Sequence[int]) -> Sequence[Job]:
        raise NotImplementedError

    def list_for_partner(self, partner_id: str) -> Sequence[Job]:
        raise NotImplementedError

    def list_with_attendance(self, *, year: int, month: int) -> Sequence[Job]:
        """Jobs having at least one daily or monthly attendance row in the period."""

        raise NotImplementedError

    def list_active(self) -> Sequence[Job]:
        """Jobs whose status is 'active', regardless of dates."""

        raise NotImplementedError
