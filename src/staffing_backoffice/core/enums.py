from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Back-office user role used for authorization."""

    ADMIN = "admin"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    """Status of one attendance day as stored in job_attendance."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    LEAVE = "leave"
    HOLIDAY = "holiday"
    WEEKEND = "weekend"


class PaymentFrequency(str, Enum):
    """How a job's pay and billing amounts are expressed."""

    MONTHLY = "monthly"
    BI_WEEKLY = "bi-weekly"
    WEEKLY = "weekly"
    HOURLY = "hourly"


class FrequencyMode(str, Enum):
    """Base-amount interpretation used by the compensation calculator."""

    MONTHLY = "monthly"
    PER_HOUR = "per_hour"


class ScopeKind(str, Enum):
    """Selection criterion of an invoice aggregation."""

    JOB = "job"
    PARTNER = "partner"
    JOB_SET = "job_set"
