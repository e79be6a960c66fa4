"""
Errors raised by the scheduling layer.
"""

from typing import Optional


class SchedulingError(Exception):
    """Base class for scheduling errors."""


class InvalidDateRange(SchedulingError, ValueError):
    """A date range whose start falls after its end."""


class FetchFailure(SchedulingError):
    """
    The persistence collaborator failed to return resources or assignments.

    Surfaced to the calendar view model, which keeps the triggering
    parameters so the load can be retried.
    """

    def __init__(self, message: str, project_id: Optional[str] = None):
        super().__init__(message)
        self.project_id = project_id


class MalformedAssignment(SchedulingError):
    """An assignment that cannot take part in aggregation."""

    def __init__(self, assignment_id: str, reason: str):
        super().__init__(f"Assignment {assignment_id} is malformed: {reason}")
        self.assignment_id = assignment_id
        self.reason = reason


class CalendarComputeError(SchedulingError):
    """Fetched records could not be turned into a calendar."""

    def __init__(self, message: str, project_id: Optional[str] = None):
        super().__init__(message)
        self.project_id = project_id
