"""
Router for project calendar endpoints.

Endpoints:
- GET /api/v1/projects/{project_id}/calendar - Monthly utilization calendar
- GET /api/v1/projects/{project_id}/leveling - Proposed allocation leveling
"""

from typing import Annotated, Optional
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from prometheus_client import Counter, Histogram

from rescal.api import schemas
from rescal.api.dependencies import get_schedule_source
from rescal.platform.logging import get_logger
from rescal.scheduling.errors import FetchFailure
from rescal.scheduling.leveling import level_assignments
from rescal.scheduling.models import ALL_RESOURCES, CalendarMonth
from rescal.scheduling.sources import ScheduleSource
from rescal.scheduling.view_model import CalendarViewModel, ViewState

logger = get_logger(__name__)

router = APIRouter()

CALENDAR_SECONDS = Histogram(
    "rescal_calendar_compute_seconds",
    "Time to load and compute a project calendar",
)
SKIPPED_ASSIGNMENTS = Counter(
    "rescal_skipped_assignments_total",
    "Malformed assignments left out of utilization aggregates",
)


@router.get("/{project_id}/calendar", response_model=schemas.CalendarResponse)
async def get_project_calendar(
    project_id: Annotated[str, Path(...)],
    source: Annotated[ScheduleSource, Depends(get_schedule_source)],
    year: Optional[int] = Query(None, ge=1, le=9999, description="Calendar year (defaults to current)"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Calendar month 1-12 (defaults to current)"),
    resource_id: str = Query(ALL_RESOURCES, description="Resource ID, or 'all'"),
):
    """
    Get the resource utilization calendar for a project month.
    """
    today = date.today()
    calendar_month = CalendarMonth(year or today.year, month or today.month)

    view = CalendarViewModel(
        source,
        project_id,
        month=calendar_month,
        resource_filter=resource_id,
    )

    with CALENDAR_SECONDS.time():
        state = await view.load()

    if state == ViewState.FAILED:
        # 502 for storage failures, 500 for compute failures
        raise HTTPException(
            status_code=(
                status.HTTP_502_BAD_GATEWAY
                if isinstance(view.error, FetchFailure)
                else status.HTTP_500_INTERNAL_SERVER_ERROR
            ),
            detail=f"Failed to load resource calendar: {view.error}",
        )

    summary = view.snapshot.summary
    if summary.skipped_assignments:
        SKIPPED_ASSIGNMENTS.inc(summary.skipped_assignments)

    return view.snapshot.to_dict()


@router.get("/{project_id}/leveling", response_model=schemas.LevelingResponse)
async def get_project_leveling(
    project_id: Annotated[str, Path(...)],
    source: Annotated[ScheduleSource, Depends(get_schedule_source)],
):
    """
    Propose allocations that remove over-allocation in a project.

    Nothing is saved; the caller decides which adjustments to apply.
    """
    try:
        assignments = await source.list_assignments(project_id)
    except FetchFailure as e:
        logger.error("Failed to load assignments for leveling", project_id=project_id, error=str(e))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    plan = level_assignments(assignments)
    if plan.skipped:
        SKIPPED_ASSIGNMENTS.inc(len(plan.skipped))

    return {
        'project_id': project_id,
        'adjustments': [
            {
                'assignment_id': adj.original_assignment.id,
                'resource_id': adj.original_assignment.resource_id,
                'original_allocation': adj.original_assignment.allocation_percentage,
                'new_allocation': adj.new_allocation,
                'reason': adj.reason,
            }
            for adj in plan.adjustments
        ],
        'leveled_assignments': plan.leveled_assignments,
        'skipped_assignments': [e.assignment_id for e in plan.skipped],
    }
