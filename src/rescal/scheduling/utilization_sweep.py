"""
Utilization Sweep

Converts interval + percentage assignments into a per-resource, per-day
aggregate allocation timeline.

Each resource with work in the requested range gets one difference array
over the range. An assignment clipped to the range adds its percentage at
the clipped start offset and removes it one past the clipped end; a prefix
sum then yields every day's aggregate. Total work is
O(assignments + days * tracked resources).

Usage:
    sweep = UtilizationSweep()
    result = sweep.compute(resources, assignments, month.date_range)

    result.utilization['res_1']['2025-02-05']  # -> 110.0
    result.aggregate('res_1', date(2025, 2, 5))
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from .errors import MalformedAssignment
from .models import DateRange, Resource, ResourceAssignment

logger = logging.getLogger(__name__)

# Prefix sums over fractional percentages can leave float residue
ROUND_DIGITS = 6

OVERALLOCATION_THRESHOLD = 100.0


def check_assignment(assignment: ResourceAssignment) -> float:
    """
    Validate an assignment for aggregation.

    Returns:
        The allocation percentage as a float

    Raises:
        MalformedAssignment: missing or inverted dates, or a non-finite or
            negative allocation percentage
    """
    for value in (assignment.start_date, assignment.end_date):
        if not isinstance(value, date):
            raise MalformedAssignment(assignment.id, f"date {value!r} is not a calendar day")

    if assignment.start_date > assignment.end_date:
        raise MalformedAssignment(
            assignment.id,
            f"start {assignment.start_date.isoformat()} is after end {assignment.end_date.isoformat()}",
        )

    raw = assignment.allocation_percentage
    if isinstance(raw, bool):
        raise MalformedAssignment(assignment.id, f"allocation {raw!r} is not a number")
    try:
        percentage = float(raw)
    except (TypeError, ValueError):
        raise MalformedAssignment(assignment.id, f"allocation {raw!r} is not a number")

    if not math.isfinite(percentage):
        raise MalformedAssignment(assignment.id, f"allocation {raw!r} is not finite")
    if percentage < 0:
        raise MalformedAssignment(assignment.id, f"allocation {raw!r} is negative")

    return percentage


@dataclass
class SweepResult:
    """Per-resource daily aggregates for one date range."""
    date_range: DateRange
    utilization: Dict[str, Dict[str, float]]
    skipped: List[MalformedAssignment] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def aggregate(self, resource_id: str, day: date) -> float:
        """Aggregate for a resource and day; 0 for idle resources."""
        return self.utilization.get(resource_id, {}).get(day.isoformat(), 0.0)

    def over_allocated_days(self, resource_id: str) -> List[str]:
        """ISO days on which the resource exceeds full capacity."""
        return [
            day_key
            for day_key, value in self.utilization.get(resource_id, {}).items()
            if value > OVERALLOCATION_THRESHOLD
        ]


class UtilizationSweep:
    """
    Computes aggregate allocation per resource and day.

    Stateless between calls: every compute() builds fresh arrays, so
    identical inputs always give identical results regardless of the
    order assignments arrive in.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def compute(
        self,
        resources: Iterable[Resource],
        assignments: Iterable[ResourceAssignment],
        date_range: DateRange,
    ) -> SweepResult:
        """
        Compute daily aggregates for every resource with work in range.

        Args:
            resources: Resources in scope; assignments of other resources
                are ignored
            assignments: Candidate assignments (inactive ones are ignored)
            date_range: Inclusive day range to compute

        Returns:
            SweepResult keyed by resource ID then ISO day. Resources with
            work in range have an entry for every day of the range.
        """
        tracked = {resource.id for resource in resources}
        days = date_range.days
        diffs: Dict[str, List[float]] = {}
        skipped: List[MalformedAssignment] = []

        for assignment in assignments:
            if not assignment.is_active:
                continue

            try:
                percentage = check_assignment(assignment)
            except MalformedAssignment as e:
                self.logger.warning(f"Skipping assignment: {e}")
                skipped.append(e)
                continue

            if assignment.resource_id not in tracked:
                continue

            clipped = date_range.clip(assignment.start_date, assignment.end_date)
            if clipped is None:
                continue

            diff = diffs.get(assignment.resource_id)
            if diff is None:
                diff = [0.0] * (days + 1)
                diffs[assignment.resource_id] = diff

            start, end = clipped
            diff[date_range.offset(start)] += percentage
            diff[date_range.offset(end) + 1] -= percentage

        utilization: Dict[str, Dict[str, float]] = {}
        day_keys = [day.isoformat() for day in date_range]

        for resource_id, diff in diffs.items():
            running = 0.0
            timeline: Dict[str, float] = {}
            for offset, day_key in enumerate(day_keys):
                running += diff[offset]
                value = round(running, ROUND_DIGITS)
                # -0.0 and float residue read as idle
                timeline[day_key] = value if value > 0 else 0.0
            utilization[resource_id] = timeline

        self.logger.debug(
            f"Swept {len(utilization)} resources over {days} days "
            f"({len(skipped)} assignments skipped)"
        )

        return SweepResult(
            date_range=date_range,
            utilization=utilization,
            skipped=skipped,
        )


def compute_utilization(
    resources: Iterable[Resource],
    assignments: Iterable[ResourceAssignment],
    date_range: DateRange,
) -> SweepResult:
    """Module-level shortcut for UtilizationSweep().compute()."""
    return UtilizationSweep().compute(resources, assignments, date_range)


def resource_timeline(
    resource_id: str,
    assignments: Iterable[ResourceAssignment],
    date_range: DateRange,
    sweep: Optional[UtilizationSweep] = None,
) -> SweepResult:
    """Sweep a single resource, identified only by ID."""
    sweep = sweep or UtilizationSweep()
    return sweep.compute(
        [Resource(id=resource_id, name=resource_id)],
        assignments,
        date_range,
    )
