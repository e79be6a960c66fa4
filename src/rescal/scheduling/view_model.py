"""
Calendar View Model

Orchestrates grid layout, filtering, the utilization sweep, band
classification and summary counters for one project calendar.

States:
    IDLE -> LOADING -> READY
                    -> FAILED -> (retry) LOADING

Every trigger (mount, month navigation, filter change, retry) starts a new
request. Only the most recent request may update the view: a slower,
superseded fetch is ignored when it finally returns.

Usage:
    view = CalendarViewModel(source, project_id="proj_1")
    await view.load()
    await view.next_month()
    await view.set_resource_filter("res_1")

    if view.state == ViewState.READY:
        view.snapshot.cell("res_1", date(2025, 2, 5)).band
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from rescal.platform.logging import get_logger

from . import calendar_grid
from .assignment_filter import filter_assignments
from .bands import UtilizationBand, classify, display_percentage
from .errors import CalendarComputeError, FetchFailure, SchedulingError
from .models import ALL_RESOURCES, CalendarMonth, Resource, ResourceAssignment
from .sources import ScheduleSource, fetch_project_schedule
from .summary import CalendarSummary, summarize
from .utilization_sweep import UtilizationSweep

logger = get_logger(__name__)


class ViewState(str, Enum):
    """Lifecycle of the calendar view."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class UtilizationCell:
    """Aggregate allocation of one resource on one day."""
    aggregate_percentage: float = 0.0
    band: UtilizationBand = UtilizationBand.NONE

    @property
    def display_percentage(self) -> float:
        return display_percentage(self.aggregate_percentage)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'aggregate_percentage': self.aggregate_percentage,
            'band': self.band.value,
        }


EMPTY_CELL = UtilizationCell()


@dataclass(frozen=True)
class CalendarSnapshot:
    """Everything the presentation layer needs to render one month."""
    project_id: str
    month: CalendarMonth
    resource_filter: str
    grid: Tuple[Optional[date], ...]
    resources: Tuple[Resource, ...]
    utilization: Dict[str, Dict[str, UtilizationCell]]
    summary: CalendarSummary

    def cell(self, resource_id: str, day: date) -> UtilizationCell:
        return self.utilization.get(resource_id, {}).get(day.isoformat(), EMPTY_CELL)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'project_id': self.project_id,
            'month': {
                'year': self.month.year,
                'month': self.month.month,
                'label': self.month.label,
            },
            'resource_filter': self.resource_filter,
            'grid': [day.isoformat() if day else None for day in self.grid],
            'resources': [
                {'id': r.id, 'name': r.name, 'email': r.email}
                for r in self.resources
            ],
            'utilization': {
                resource_id: {day_key: c.to_dict() for day_key, c in cells.items()}
                for resource_id, cells in self.utilization.items()
            },
            'summary': self.summary.to_dict(),
        }


def resources_in_scope(resources: Sequence[Resource], resource_filter: str) -> List[Resource]:
    if resource_filter == ALL_RESOURCES:
        return list(resources)
    return [r for r in resources if r.id == resource_filter]


def compute_snapshot(
    project_id: str,
    month: CalendarMonth,
    resource_filter: str,
    resources: Sequence[Resource],
    assignments: Sequence[ResourceAssignment],
    sweep: Optional[UtilizationSweep] = None,
) -> CalendarSnapshot:
    """
    Build a calendar snapshot from already-fetched records.

    Pure: no I/O and no state carried between calls, so identical inputs
    give identical snapshots.
    """
    sweep = sweep or UtilizationSweep()
    date_range = month.date_range

    scoped_resources = resources_in_scope(resources, resource_filter)
    scoped_assignments = filter_assignments(assignments, resource_filter)

    result = sweep.compute(scoped_resources, scoped_assignments, date_range)

    day_keys = [day.isoformat() for day in date_range]
    utilization: Dict[str, Dict[str, UtilizationCell]] = {}
    for resource in scoped_resources:
        timeline = result.utilization.get(resource.id, {})
        cells: Dict[str, UtilizationCell] = {}
        for day_key in day_keys:
            aggregate = timeline.get(day_key, 0.0)
            cells[day_key] = UtilizationCell(aggregate, classify(aggregate))
        utilization[resource.id] = cells

    summary = summarize(
        scoped_resources,
        scoped_assignments,
        result.utilization,
        skipped_assignments=result.skipped_count,
    )

    return CalendarSnapshot(
        project_id=project_id,
        month=month,
        resource_filter=resource_filter,
        grid=tuple(calendar_grid.generate(month)),
        resources=tuple(scoped_resources),
        utilization=utilization,
        summary=summary,
    )


@dataclass(frozen=True)
class CalendarRequest:
    """Parameters of one load."""
    month: CalendarMonth
    resource_filter: str = ALL_RESOURCES


class CalendarViewModel:
    """
    Stateful controller for a project's resource calendar.

    All state lives on the instance; the source and the initial parameters
    are passed in explicitly.
    """

    def __init__(
        self,
        source: ScheduleSource,
        project_id: str,
        month: Optional[CalendarMonth] = None,
        resource_filter: str = ALL_RESOURCES,
        sweep: Optional[UtilizationSweep] = None,
    ):
        self.source = source
        self.project_id = project_id
        self.sweep = sweep or UtilizationSweep()

        self.state = ViewState.IDLE
        self.snapshot: Optional[CalendarSnapshot] = None
        self.error: Optional[SchedulingError] = None
        self.failed_request: Optional[CalendarRequest] = None

        self._request = CalendarRequest(
            month=month or CalendarMonth.from_date(date.today()),
            resource_filter=resource_filter,
        )
        self._generation = 0

    @property
    def month(self) -> CalendarMonth:
        """Most recently requested month."""
        return self._request.month

    @property
    def resource_filter(self) -> str:
        """Most recently requested resource filter."""
        return self._request.resource_filter

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def load(self) -> ViewState:
        """Load the current month and filter (initial mount or refresh)."""
        return await self._run(self._request)

    async def previous_month(self) -> ViewState:
        return await self._run(CalendarRequest(self.month.previous(), self.resource_filter))

    async def next_month(self) -> ViewState:
        return await self._run(CalendarRequest(self.month.next(), self.resource_filter))

    async def go_to_month(self, month: CalendarMonth) -> ViewState:
        return await self._run(CalendarRequest(month, self.resource_filter))

    async def set_resource_filter(self, resource_filter: str) -> ViewState:
        return await self._run(CalendarRequest(self.month, resource_filter))

    async def retry(self) -> ViewState:
        """Re-run the request that failed, or the current one."""
        return await self._run(self.failed_request or self._request)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run(self, request: CalendarRequest) -> ViewState:
        self._generation += 1
        generation = self._generation
        self._request = request
        self.state = ViewState.LOADING

        log = logger.bind(
            project_id=self.project_id,
            month=request.month.label,
            resource_filter=request.resource_filter,
            generation=generation,
        )
        log.debug("Loading resource calendar")

        try:
            resources, assignments = await fetch_project_schedule(self.source, self.project_id)
        except FetchFailure as e:
            if not self._is_current(generation):
                log.info("Discarding failure of superseded calendar request")
                return self.state
            log.error("Failed to load resource calendar", error=str(e))
            self.state = ViewState.FAILED
            self.error = e
            self.failed_request = request
            return self.state

        if not self._is_current(generation):
            log.info("Discarding result of superseded calendar request")
            return self.state

        try:
            snapshot = compute_snapshot(
                self.project_id,
                request.month,
                request.resource_filter,
                resources,
                assignments,
                sweep=self.sweep,
            )
        except Exception as e:
            log.exception("Failed to compute resource calendar")
            self.state = ViewState.FAILED
            self.error = CalendarComputeError(
                f"Failed to compute calendar for project {self.project_id}: {e}",
                project_id=self.project_id,
            )
            self.failed_request = request
            return self.state

        self.snapshot = snapshot
        self.state = ViewState.READY
        self.error = None
        self.failed_request = None

        log.info(
            "Resource calendar ready",
            resources=self.snapshot.summary.total_resources,
            over_allocated_days=self.snapshot.summary.over_allocated_days,
            skipped_assignments=self.snapshot.summary.skipped_assignments,
        )
        return self.state
