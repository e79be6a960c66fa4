"""
Over-allocation conflict checks.

Finds the days on which a resource is committed beyond full capacity,
together with the assignments responsible, so an edit can be validated
before it is saved.

Severity:
- critical: > 120%
- high: > 110%
- medium: > 105%
- low: otherwise over 100%

Usage:
    report = find_overallocations("res_1", assignments, date_range)

    # Validate an edit: leave out the stored version of the assignment
    report = find_overallocations(
        "res_1", assignments + [edited], date_range,
        exclude_assignment_id=edited.id,
    )
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .capacity import covering_assignments, usable_assignments
from .models import DateRange, ResourceAssignment
from .utilization_sweep import OVERALLOCATION_THRESHOLD, resource_timeline

logger = logging.getLogger(__name__)


class ConflictSeverity(str, Enum):
    """Severity levels for conflicts."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def severity_for(allocation: float) -> ConflictSeverity:
    if allocation > 120:
        return ConflictSeverity.CRITICAL
    if allocation > 110:
        return ConflictSeverity.HIGH
    if allocation > 105:
        return ConflictSeverity.MEDIUM
    return ConflictSeverity.LOW


@dataclass
class OverallocationConflict:
    """One over-allocated day."""
    resource_id: str
    day: date
    total_allocation: float
    severity: ConflictSeverity
    assignments: List[ResourceAssignment]

    @property
    def excess(self) -> float:
        return self.total_allocation - OVERALLOCATION_THRESHOLD

    @property
    def description(self) -> str:
        return (
            f"{self.resource_id} is overallocated at {self.total_allocation:.0f}% "
            f"on {self.day.isoformat()} ({self.excess:.0f}% over capacity)"
        )

    @property
    def suggested_actions(self) -> List[Dict[str, Any]]:
        return [
            {
                'type': 'reduce_allocation',
                'description': f'Reduce allocation by {self.excess:.0f}%'
            },
            {
                'type': 'extend_timeline',
                'description': 'Extend assignment dates to spread work'
            },
            {
                'type': 'reassign',
                'description': 'Reassign some work to other team members'
            }
        ]


@dataclass
class ConflictReport:
    """Result of a conflict check."""
    resource_id: str
    date_range: DateRange
    conflicts: List[OverallocationConflict]
    detected_at: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    @property
    def by_severity(self) -> Dict[str, int]:
        counts = {severity.value: 0 for severity in ConflictSeverity}
        for conflict in self.conflicts:
            counts[conflict.severity.value] += 1
        return counts


def find_overallocations(
    resource_id: str,
    assignments: Iterable[ResourceAssignment],
    date_range: DateRange,
    exclude_assignment_id: Optional[str] = None,
) -> ConflictReport:
    """
    Detect days where a resource's aggregate allocation exceeds 100%.

    Args:
        resource_id: Resource to check
        assignments: Candidate assignments (other resources are ignored)
        date_range: Inclusive range to check
        exclude_assignment_id: Assignment to leave out, e.g. the stored
            version of one being edited

    Returns:
        ConflictReport ordered by day
    """
    usable = [
        a for a in usable_assignments(resource_id, assignments)
        if a.id != exclude_assignment_id
    ]
    result = resource_timeline(resource_id, usable, date_range)
    over_days = result.over_allocated_days(resource_id)

    conflicts: List[OverallocationConflict] = []
    if over_days:
        covering = covering_assignments(usable, date_range)
        for day_key in over_days:
            total = result.utilization[resource_id][day_key]
            conflicts.append(OverallocationConflict(
                resource_id=resource_id,
                day=date.fromisoformat(day_key),
                total_allocation=total,
                severity=severity_for(total),
                assignments=covering[day_key],
            ))

    logger.info(f"Detected {len(conflicts)} overallocated days for {resource_id}")

    return ConflictReport(
        resource_id=resource_id,
        date_range=date_range,
        conflicts=conflicts,
    )
