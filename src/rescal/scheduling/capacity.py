"""
Per-resource capacity views.

- resource_utilization: aggregate utilization of one resource over a range
- daily_availability: remaining capacity per day with the covering work
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List

from .errors import MalformedAssignment
from .models import DateRange, ResourceAssignment
from .utilization_sweep import check_assignment, resource_timeline

logger = logging.getLogger(__name__)

FULL_CAPACITY = 100.0


@dataclass
class ResourceUtilization:
    """Utilization of one resource over a date range."""
    resource_id: str
    date_range: DateRange
    total_allocation: float
    assignments: List[ResourceAssignment]
    utilization_by_date: Dict[str, float]
    skipped_assignments: int = 0


@dataclass
class DayAvailability:
    """Capacity left on one day."""
    day: date
    available_percentage: float
    allocations: List[ResourceAssignment] = field(default_factory=list)


def usable_assignments(
    resource_id: str,
    assignments: Iterable[ResourceAssignment],
) -> List[ResourceAssignment]:
    """Active, well-formed assignments of one resource."""
    usable = []
    for assignment in assignments:
        if assignment.resource_id != resource_id or not assignment.is_active:
            continue
        try:
            check_assignment(assignment)
        except MalformedAssignment as e:
            logger.warning(f"Ignoring assignment: {e}")
            continue
        usable.append(assignment)
    return usable


def covering_assignments(
    assignments: Iterable[ResourceAssignment],
    date_range: DateRange,
) -> Dict[str, List[ResourceAssignment]]:
    """
    Assignments covering each day of the range, keyed by ISO day.

    Sweeps start/stop events over the range instead of testing every
    assignment against every day. Assignments are expected to be
    well-formed (see usable_assignments).
    """
    days = date_range.days
    starting: List[List[ResourceAssignment]] = [[] for _ in range(days + 1)]
    stopping: List[List[ResourceAssignment]] = [[] for _ in range(days + 1)]

    for assignment in assignments:
        clipped = date_range.clip(assignment.start_date, assignment.end_date)
        if clipped is None:
            continue
        start, end = clipped
        starting[date_range.offset(start)].append(assignment)
        stopping[date_range.offset(end) + 1].append(assignment)

    covering: Dict[str, List[ResourceAssignment]] = {}
    active: Dict[str, ResourceAssignment] = {}
    for offset, day in enumerate(date_range):
        for assignment in stopping[offset]:
            active.pop(assignment.id, None)
        for assignment in starting[offset]:
            active[assignment.id] = assignment
        covering[day.isoformat()] = list(active.values())

    return covering


def resource_utilization(
    resource_id: str,
    assignments: Iterable[ResourceAssignment],
    date_range: DateRange,
) -> ResourceUtilization:
    """
    Summarize one resource's allocation over a range.

    Args:
        resource_id: Resource to report on
        assignments: Candidate assignments (other resources are ignored)
        date_range: Inclusive range

    Returns:
        ResourceUtilization with overlapping assignments, the sum of their
        percentages and the unclamped per-day aggregate for every day
    """
    own = [a for a in assignments if a.resource_id == resource_id]
    result = resource_timeline(resource_id, own, date_range)

    overlapping = [
        a for a in usable_assignments(resource_id, own)
        if date_range.clip(a.start_date, a.end_date) is not None
    ]
    total_allocation = sum(float(a.allocation_percentage) for a in overlapping)

    utilization_by_date = {
        day.isoformat(): result.aggregate(resource_id, day)
        for day in date_range
    }

    return ResourceUtilization(
        resource_id=resource_id,
        date_range=date_range,
        total_allocation=total_allocation,
        assignments=overlapping,
        utilization_by_date=utilization_by_date,
        skipped_assignments=result.skipped_count,
    )


def daily_availability(
    resource_id: str,
    assignments: Iterable[ResourceAssignment],
    date_range: DateRange,
) -> List[DayAvailability]:
    """
    Remaining capacity of a resource for every day in the range.

    Available capacity is 100 minus the aggregate, floored at zero.
    """
    usable = usable_assignments(resource_id, assignments)
    result = resource_timeline(resource_id, usable, date_range)
    covering = covering_assignments(usable, date_range)

    availability = []
    for day in date_range:
        aggregate = result.aggregate(resource_id, day)
        availability.append(DayAvailability(
            day=day,
            available_percentage=max(0.0, FULL_CAPACITY - aggregate),
            allocations=covering[day.isoformat()],
        ))
    return availability
