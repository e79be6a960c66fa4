"""
Headline counters for a computed calendar.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Mapping

from .models import Resource, ResourceAssignment
from .utilization_sweep import OVERALLOCATION_THRESHOLD


@dataclass(frozen=True)
class CalendarSummary:
    """Summary badges shown beside the calendar."""
    total_resources: int = 0
    active_assignments: int = 0
    over_allocated_days: int = 0
    skipped_assignments: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def summarize(
    resources: Iterable[Resource],
    assignments: Iterable[ResourceAssignment],
    utilization: Mapping[str, Mapping[str, float]],
    skipped_assignments: int = 0,
) -> CalendarSummary:
    """
    Derive summary counters.

    Args:
        resources: Resources in scope (after filtering)
        assignments: Assignments in scope; active ones are counted
            regardless of dates
        utilization: resource ID -> ISO day -> aggregate percentage
        skipped_assignments: Malformed records dropped during aggregation

    Returns:
        CalendarSummary
    """
    over_allocated_days = sum(
        sum(1 for value in timeline.values() if value > OVERALLOCATION_THRESHOLD)
        for timeline in utilization.values()
    )

    return CalendarSummary(
        total_resources=sum(1 for _ in resources),
        active_assignments=sum(1 for a in assignments if a.is_active),
        over_allocated_days=over_allocated_days,
        skipped_assignments=skipped_assignments,
    )
