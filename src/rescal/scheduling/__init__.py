"""
Rescal - Scheduling

Resource utilization for the project calendar:

- calendar_grid: month layout in Sunday-first weeks
- assignment_filter: narrow assignments to one resource
- utilization_sweep: per-resource daily aggregates (difference arrays)
- bands: utilization band classification
- summary: headline counters
- view_model: calendar orchestration with last-request-wins loading

Supplementary operations:
- capacity: per-resource utilization report and daily availability
- conflicts: over-allocated days with contributing assignments
- leveling: proposed allocations that remove over-allocation
"""

from .models import (
    ALL_RESOURCES,
    CalendarMonth,
    DateRange,
    Resource,
    ResourceAssignment,
)
from .errors import CalendarComputeError, FetchFailure, InvalidDateRange, MalformedAssignment
from .bands import UtilizationBand, classify
from .utilization_sweep import SweepResult, UtilizationSweep
from .summary import CalendarSummary, summarize
from .view_model import CalendarSnapshot, CalendarViewModel, ViewState, compute_snapshot

__all__ = [
    "ALL_RESOURCES",
    "CalendarMonth",
    "DateRange",
    "Resource",
    "ResourceAssignment",
    "CalendarComputeError",
    "FetchFailure",
    "InvalidDateRange",
    "MalformedAssignment",
    "UtilizationBand",
    "classify",
    "SweepResult",
    "UtilizationSweep",
    "CalendarSummary",
    "summarize",
    "CalendarSnapshot",
    "CalendarViewModel",
    "ViewState",
    "compute_snapshot",
]
