"""
Tests for the calendar view model.
"""

import asyncio
from datetime import date, datetime
from unittest.mock import AsyncMock, Mock

import pytest

from rescal.scheduling.bands import UtilizationBand
from rescal.scheduling.errors import CalendarComputeError, FetchFailure
from rescal.scheduling.models import CalendarMonth, ResourceAssignment
from rescal.scheduling.utilization_sweep import UtilizationSweep
from rescal.scheduling.sources import InMemoryScheduleSource
from rescal.scheduling.view_model import (
    EMPTY_CELL,
    CalendarViewModel,
    ViewState,
    compute_snapshot,
)

FEBRUARY = CalendarMonth(2025, 2)


class GatedSource:
    """Source whose loads finish only when the test releases them."""

    def __init__(self, resources, assignments):
        self.resources = resources
        self.assignments = assignments
        self.gates = []

    async def _wait(self):
        gate = asyncio.Event()
        outcome = {}
        self.gates.append((gate, outcome))
        await gate.wait()
        if "error" in outcome:
            raise outcome["error"]

    async def list_resources(self):
        await self._wait()
        return list(self.resources)

    async def list_assignments(self, project_id):
        return [a for a in self.assignments if a.project_id == project_id]

    async def list_resource_assignments(self, resource_id):
        return [a for a in self.assignments if a.resource_id == resource_id]


async def wait_for_gates(source, count):
    while len(source.gates) < count:
        await asyncio.sleep(0)


def release(source, index, error=None):
    gate, outcome = source.gates[index]
    if error is not None:
        outcome["error"] = error
    gate.set()


@pytest.fixture
def source(resources, scenario_assignments):
    return InMemoryScheduleSource(resources, scenario_assignments)


class TestComputeSnapshot:

    def test_scenario_cells(self, resources, scenario_assignments):
        snapshot = compute_snapshot("proj_1", FEBRUARY, "res_1", resources, scenario_assignments)

        assert [r.id for r in snapshot.resources] == ["res_1"]
        assert snapshot.cell("res_1", date(2025, 2, 1)).band == UtilizationBand.MODERATE
        assert snapshot.cell("res_1", date(2025, 2, 4)).aggregate_percentage == 60
        assert snapshot.cell("res_1", date(2025, 2, 5)).aggregate_percentage == 110
        assert snapshot.cell("res_1", date(2025, 2, 5)).band == UtilizationBand.OVER
        assert snapshot.cell("res_1", date(2025, 2, 5)).display_percentage == 100
        assert snapshot.cell("res_1", date(2025, 2, 11)).band == UtilizationBand.LIGHT
        assert snapshot.cell("res_1", date(2025, 2, 16)).band == UtilizationBand.NONE
        assert snapshot.summary.over_allocated_days == 6
        assert snapshot.summary.active_assignments == 2
        assert snapshot.summary.total_resources == 1

    def test_every_resource_has_every_day(self, resources, scenario_assignments):
        snapshot = compute_snapshot("proj_1", FEBRUARY, "all", resources, scenario_assignments)

        assert set(snapshot.utilization) == {"res_1", "res_2", "res_3"}
        assert all(len(cells) == 28 for cells in snapshot.utilization.values())
        assert snapshot.utilization["res_3"]["2025-02-14"] == EMPTY_CELL

    def test_grid_matches_month(self, resources):
        snapshot = compute_snapshot("proj_1", FEBRUARY, "all", resources, [])

        assert snapshot.grid[:6] == (None,) * 6
        assert snapshot.grid[6] == date(2025, 2, 1)

    def test_unknown_filter_gives_empty_scope(self, resources, scenario_assignments):
        snapshot = compute_snapshot("proj_1", FEBRUARY, "res_missing", resources, scenario_assignments)

        assert snapshot.resources == ()
        assert snapshot.utilization == {}
        assert snapshot.summary.total_resources == 0

    def test_identical_inputs_give_identical_snapshots(self, resources, scenario_assignments):
        first = compute_snapshot("proj_1", FEBRUARY, "all", resources, scenario_assignments)
        second = compute_snapshot("proj_1", FEBRUARY, "all", resources, list(reversed(scenario_assignments)))

        assert first == second

    def test_to_dict(self, resources, scenario_assignments):
        data = compute_snapshot("proj_1", FEBRUARY, "all", resources, scenario_assignments).to_dict()

        assert data["month"] == {"year": 2025, "month": 2, "label": "February 2025"}
        assert data["grid"][6] == "2025-02-01"
        assert data["utilization"]["res_1"]["2025-02-05"] == {"aggregate_percentage": 110, "band": "over"}
        assert data["summary"]["over_allocated_days"] == 6


class TestCalendarViewModel:

    @pytest.mark.asyncio
    async def test_initial_state_is_idle(self, source):
        view = CalendarViewModel(source, "proj_1", month=FEBRUARY)

        assert view.state == ViewState.IDLE
        assert view.snapshot is None

    @pytest.mark.asyncio
    async def test_load_becomes_ready(self, source):
        view = CalendarViewModel(source, "proj_1", month=FEBRUARY)

        state = await view.load()

        assert state == ViewState.READY
        assert view.snapshot.month == FEBRUARY
        assert view.snapshot.summary.total_resources == 3
        assert view.snapshot.summary.over_allocated_days == 6

    @pytest.mark.asyncio
    async def test_navigation(self, source):
        view = CalendarViewModel(source, "proj_1", month=FEBRUARY)
        await view.load()

        await view.next_month()
        assert view.snapshot.month == CalendarMonth(2025, 3)

        await view.previous_month()
        await view.previous_month()
        assert view.snapshot.month == CalendarMonth(2025, 1)
        # res_2 is at 80% from Jan 25
        assert view.snapshot.cell("res_2", date(2025, 1, 25)).band == UtilizationBand.MODERATE

        await view.go_to_month(CalendarMonth(2024, 12))
        assert view.month == CalendarMonth(2024, 12)

    @pytest.mark.asyncio
    async def test_filter_change_keeps_month(self, source):
        view = CalendarViewModel(source, "proj_1", month=FEBRUARY)
        await view.load()

        await view.set_resource_filter("res_2")

        assert view.snapshot.month == FEBRUARY
        assert [r.id for r in view.snapshot.resources] == ["res_2"]
        assert view.snapshot.summary.over_allocated_days == 0

    @pytest.mark.asyncio
    async def test_failure_then_retry(self, resources, scenario_assignments):
        source = InMemoryScheduleSource(resources, scenario_assignments)
        source.list_resources = AsyncMock(side_effect=FetchFailure("database unavailable"))
        view = CalendarViewModel(source, "proj_1", month=FEBRUARY)

        state = await view.load()

        assert state == ViewState.FAILED
        assert "database unavailable" in str(view.error)
        assert view.failed_request.month == FEBRUARY

        source.list_resources = AsyncMock(return_value=resources)
        state = await view.retry()

        assert state == ViewState.READY
        assert view.error is None
        assert view.failed_request is None
        assert view.snapshot.month == FEBRUARY

    @pytest.mark.asyncio
    async def test_unexpected_errors_become_fetch_failures(self, source):
        source.list_assignments = AsyncMock(side_effect=RuntimeError("boom"))
        view = CalendarViewModel(source, "proj_1", month=FEBRUARY)

        state = await view.load()

        assert state == ViewState.FAILED
        assert isinstance(view.error, FetchFailure)
        assert view.error.project_id == "proj_1"

    @pytest.mark.asyncio
    async def test_superseded_result_is_discarded(self, resources, scenario_assignments):
        source = GatedSource(resources, scenario_assignments)
        view = CalendarViewModel(source, "proj_1", month=FEBRUARY)

        first = asyncio.create_task(view.load())
        await wait_for_gates(source, 1)
        second = asyncio.create_task(view.next_month())
        await wait_for_gates(source, 2)
        assert view.state == ViewState.LOADING

        # Newer request finishes first
        release(source, 1)
        assert await second == ViewState.READY
        assert view.snapshot.month == CalendarMonth(2025, 3)

        # Stale one returns late and must not overwrite
        release(source, 0)
        await first
        assert view.state == ViewState.READY
        assert view.snapshot.month == CalendarMonth(2025, 3)

    @pytest.mark.asyncio
    async def test_superseded_failure_is_ignored(self, resources, scenario_assignments):
        source = GatedSource(resources, scenario_assignments)
        view = CalendarViewModel(source, "proj_1", month=FEBRUARY)

        first = asyncio.create_task(view.load())
        await wait_for_gates(source, 1)
        second = asyncio.create_task(view.set_resource_filter("res_1"))
        await wait_for_gates(source, 2)

        release(source, 0, error=FetchFailure("timed out"))
        await first
        assert view.state == ViewState.LOADING
        assert view.error is None

        release(source, 1)
        assert await second == ViewState.READY
        assert view.snapshot.resource_filter == "res_1"

    @pytest.mark.asyncio
    async def test_older_request_finishing_last_keeps_latest_parameters(self, resources, scenario_assignments):
        source = GatedSource(resources, scenario_assignments)
        view = CalendarViewModel(source, "proj_1", month=FEBRUARY)

        tasks = [
            asyncio.create_task(view.load()),
            asyncio.create_task(view.next_month()),
            asyncio.create_task(view.next_month()),
        ]
        await wait_for_gates(source, 3)

        for index in (2, 0, 1):
            release(source, index)
        await asyncio.gather(*tasks)

        assert view.month == CalendarMonth(2025, 4)
        assert view.snapshot.month == CalendarMonth(2025, 4)


class TestTimestampInputs:

    @pytest.mark.asyncio
    async def test_timestamp_dates_load(self, resources):
        assignments = [
            ResourceAssignment(
                id="asg_ts",
                resource_id="res_1",
                start_date=datetime(2025, 2, 1),
                end_date=datetime(2025, 2, 3, 23, 59),
                allocation_percentage=70,
                project_id="proj_1",
            ),
        ]
        view = CalendarViewModel(InMemoryScheduleSource(resources, assignments), "proj_1", month=FEBRUARY)

        assert await view.load() == ViewState.READY
        assert view.snapshot.cell("res_1", date(2025, 2, 3)).aggregate_percentage == 70
        assert view.snapshot.cell("res_1", date(2025, 2, 4)).aggregate_percentage == 0

    @pytest.mark.asyncio
    async def test_compute_error_fails_the_view(self, source):
        sweep = Mock()
        sweep.compute.side_effect = RuntimeError("bad record")
        view = CalendarViewModel(source, "proj_1", month=FEBRUARY, sweep=sweep)

        state = await view.load()

        assert state == ViewState.FAILED
        assert isinstance(view.error, CalendarComputeError)
        assert "bad record" in str(view.error)
        assert view.failed_request.month == FEBRUARY

        view.sweep = UtilizationSweep()
        assert await view.retry() == ViewState.READY
