from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class InvalidInputError(DomainError):
    """Raised when input data is malformed or violates domain rules."""


# Validators historically raised ValidationError; both names are the same class.
ValidationError = InvalidInputError


class NotFoundError(DomainError):
    """Raised when a scope resolves to nothing or a required record is missing."""


class MissingAttendanceError(DomainError):
    """Raised when a job has no attendance for the requested period."""

    def __init__(self, job_id: int, message: Optional[str] = None):
        self.job_id = int(job_id)
        super().__init__(message or f"No attendance recorded for job {job_id} in this period")


class PersistenceError(DomainError):
    """Raised when the invoice sink cannot commit an invoice atomically."""


class DuplicateInvoiceError(PersistenceError):
    """Raised when the store rejects an invoice for an already invoiced scope and period."""


class RenderingOrStorageError(DomainError):
    """Raised when the invoice document cannot be rendered or stored.

    The invoice itself stays committed; only its storage locator is missing.
    """


class AggregationCancelledError(DomainError):
    """Raised when the caller abandons an aggregation between two jobs."""


class AuthenticationError(DomainError):
    """Raised when login credentials or tokens are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
