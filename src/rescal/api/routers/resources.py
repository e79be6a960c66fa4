"""
Router for per-resource scheduling endpoints.

Endpoints:
- GET /api/v1/resources/{resource_id}/utilization - Utilization over a range
- GET /api/v1/resources/{resource_id}/availability - Remaining capacity per day
- GET /api/v1/resources/{resource_id}/conflicts - Over-allocated days
"""

from typing import Annotated, List, Optional
from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from rescal.api import schemas
from rescal.api.dependencies import get_schedule_source
from rescal.platform.config import settings
from rescal.platform.logging import get_logger
from rescal.scheduling.capacity import daily_availability, resource_utilization
from rescal.scheduling.conflicts import find_overallocations
from rescal.scheduling.errors import FetchFailure, InvalidDateRange
from rescal.scheduling.models import DateRange, ResourceAssignment
from rescal.scheduling.sources import ScheduleSource

logger = get_logger(__name__)

router = APIRouter()


def resolve_range(start_date: Optional[date], end_date: Optional[date]) -> DateRange:
    """Default to today through the configured window."""
    start = start_date or date.today()
    end = end_date or start + timedelta(days=settings.DEFAULT_WINDOW_DAYS)
    try:
        return DateRange(start, end)
    except InvalidDateRange as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


async def load_resource_assignments(source: ScheduleSource, resource_id: str) -> List[ResourceAssignment]:
    try:
        return list(await source.list_resource_assignments(resource_id))
    except FetchFailure as e:
        logger.error("Failed to load resource assignments", resource_id=resource_id, error=str(e))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get("/{resource_id}/utilization", response_model=schemas.ResourceUtilizationResponse)
async def get_resource_utilization(
    resource_id: Annotated[str, Path(...)],
    source: Annotated[ScheduleSource, Depends(get_schedule_source)],
    start_date: Optional[date] = Query(None, description="Start date (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="End date (YYYY-MM-DD)"),
):
    """
    Get utilization for a specific resource.
    """
    date_range = resolve_range(start_date, end_date)
    assignments = await load_resource_assignments(source, resource_id)

    report = resource_utilization(resource_id, assignments, date_range)

    return {
        'resource_id': resource_id,
        'start_date': date_range.start,
        'end_date': date_range.end,
        'total_allocation': report.total_allocation,
        'assignments': report.assignments,
        'utilization_by_date': report.utilization_by_date,
        'skipped_assignments': report.skipped_assignments,
    }


@router.get("/{resource_id}/availability", response_model=schemas.AvailabilityResponse)
async def get_resource_availability(
    resource_id: Annotated[str, Path(...)],
    source: Annotated[ScheduleSource, Depends(get_schedule_source)],
    start_date: Optional[date] = Query(None, description="Start date (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="End date (YYYY-MM-DD)"),
):
    """
    Get remaining capacity per day for a resource.
    """
    date_range = resolve_range(start_date, end_date)
    assignments = await load_resource_assignments(source, resource_id)

    days = daily_availability(resource_id, assignments, date_range)

    return {
        'resource_id': resource_id,
        'start_date': date_range.start,
        'end_date': date_range.end,
        'days': [
            {
                'day': d.day,
                'available_percentage': d.available_percentage,
                'allocations': d.allocations,
            }
            for d in days
        ],
    }


@router.get("/{resource_id}/conflicts", response_model=schemas.ConflictResponse)
async def get_resource_conflicts(
    resource_id: Annotated[str, Path(...)],
    source: Annotated[ScheduleSource, Depends(get_schedule_source)],
    start_date: Optional[date] = Query(None, description="Start date (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="End date (YYYY-MM-DD)"),
    exclude_assignment_id: Optional[str] = Query(None, description="Assignment to leave out, e.g. one being edited"),
):
    """
    Get over-allocated days for a resource.
    """
    date_range = resolve_range(start_date, end_date)
    assignments = await load_resource_assignments(source, resource_id)

    report = find_overallocations(
        resource_id,
        assignments,
        date_range,
        exclude_assignment_id=exclude_assignment_id,
    )

    return {
        'resource_id': resource_id,
        'start_date': date_range.start,
        'end_date': date_range.end,
        'has_conflicts': report.has_conflicts,
        'by_severity': report.by_severity,
        'conflicts': [
            {
                'day': c.day,
                'total_allocation': c.total_allocation,
                'severity': c.severity,
                'description': c.description,
                'assignments': c.assignments,
                'suggested_actions': c.suggested_actions,
            }
            for c in report.conflicts
        ],
        'detected_at': report.detected_at,
    }
