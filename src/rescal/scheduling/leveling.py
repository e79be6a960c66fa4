"""
Resource leveling.

Proposes reduced allocations so no user resource is committed beyond full
capacity on any day. On an over-allocated day with n covering assignments
each one is capped at floor(100 / n); an assignment spanning several such
days takes its smallest cap. Allocations are only ever reduced, so leveling
never creates a new over-allocation.

The plan is advisory: inputs are left untouched and nothing is persisted.
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, Iterable, List, Tuple

from .capacity import covering_assignments, usable_assignments
from .errors import MalformedAssignment
from .models import DateRange, ResourceAssignment
from .utilization_sweep import check_assignment, resource_timeline

logger = logging.getLogger(__name__)

LEVELED_RESOURCE_TYPE = "user"


@dataclass
class Adjustment:
    """A proposed allocation change for one assignment."""
    original_assignment: ResourceAssignment
    new_allocation: float
    reason: str


@dataclass
class LevelingPlan:
    """Leveled copy of the assignments plus the changes made."""
    leveled_assignments: List[ResourceAssignment]
    adjustments: List[Adjustment] = field(default_factory=list)
    skipped: List[MalformedAssignment] = field(default_factory=list)

    @property
    def adjusted_ids(self) -> List[str]:
        return [a.original_assignment.id for a in self.adjustments]


def _caps_for_resource(
    resource_id: str,
    assignments: List[ResourceAssignment],
) -> Dict[str, Tuple[float, date, float]]:
    """
    Smallest even share per assignment over the resource's over-allocated days.

    Returns:
        assignment ID -> (cap, day that imposed it, aggregate on that day)
    """
    usable = usable_assignments(resource_id, assignments)
    if not usable:
        return {}

    span = DateRange(
        min(a.start_date for a in usable),
        max(a.end_date for a in usable),
    )
    result = resource_timeline(resource_id, usable, span)
    over_days = result.over_allocated_days(resource_id)
    if not over_days:
        return {}

    covering = covering_assignments(usable, span)
    caps: Dict[str, Tuple[float, date, float]] = {}
    for day_key in over_days:
        day_assignments = covering[day_key]
        share = float(math.floor(100 / len(day_assignments)))
        total = result.utilization[resource_id][day_key]
        for assignment in day_assignments:
            current = caps.get(assignment.id)
            if current is None or share < current[0]:
                caps[assignment.id] = (share, date.fromisoformat(day_key), total)
    return caps


def level_assignments(assignments: Iterable[ResourceAssignment]) -> LevelingPlan:
    """
    Propose allocations that remove over-allocation.

    Args:
        assignments: A project's assignments, any resources

    Returns:
        LevelingPlan whose leveled_assignments keep the input order;
        unchanged assignments are the same objects, changed ones are copies.
        Malformed assignments, active or not, are left out and listed in
        skipped.
    """
    kept: List[ResourceAssignment] = []
    skipped: List[MalformedAssignment] = []
    for assignment in assignments:
        try:
            check_assignment(assignment)
        except MalformedAssignment as e:
            logger.warning(f"Leaving assignment out of leveling: {e}")
            skipped.append(e)
            continue
        kept.append(assignment)
    assignments = kept

    by_resource: Dict[str, List[ResourceAssignment]] = defaultdict(list)
    for assignment in assignments:
        if assignment.resource_type == LEVELED_RESOURCE_TYPE:
            by_resource[assignment.resource_id].append(assignment)

    caps: Dict[str, Tuple[float, date, float]] = {}
    for resource_id, resource_assignments in by_resource.items():
        caps.update(_caps_for_resource(resource_id, resource_assignments))

    leveled: List[ResourceAssignment] = []
    adjustments: List[Adjustment] = []
    for assignment in assignments:
        cap = caps.get(assignment.id)
        if cap is None or cap[0] >= float(assignment.allocation_percentage):
            leveled.append(assignment)
            continue

        new_allocation, day, total = cap
        original = float(assignment.allocation_percentage)
        leveled.append(replace(assignment, allocation_percentage=new_allocation))
        adjustments.append(Adjustment(
            original_assignment=assignment,
            new_allocation=new_allocation,
            reason=(
                f"Over-allocation on {day.isoformat()} ({total:g}%). "
                f"Reduced from {original:g}% to {new_allocation:g}%."
            ),
        ))

    logger.info(
        f"Leveling proposed {len(adjustments)} adjustments across {len(by_resource)} resources"
    )
    return LevelingPlan(leveled_assignments=leveled, adjustments=adjustments, skipped=skipped)
