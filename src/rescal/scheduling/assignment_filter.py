"""
Assignment filtering by resource.
"""

from typing import Iterable, List

from .models import ALL_RESOURCES, ResourceAssignment


def filter_assignments(
    assignments: Iterable[ResourceAssignment],
    resource_filter: str = ALL_RESOURCES,
) -> List[ResourceAssignment]:
    """
    Narrow assignments to a single resource.

    Args:
        assignments: Assignments to filter (not modified)
        resource_filter: A resource ID, or "all" to keep everything

    Returns:
        New list of matching assignments, in input order
    """
    if resource_filter == ALL_RESOURCES:
        return list(assignments)
    return [a for a in assignments if a.resource_id == resource_filter]
