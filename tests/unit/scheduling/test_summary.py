"""
Tests for assignment filtering and summary counters.
"""

from datetime import date

from rescal.scheduling.assignment_filter import filter_assignments
from rescal.scheduling.models import ALL_RESOURCES, DateRange
from rescal.scheduling.summary import CalendarSummary, summarize
from rescal.scheduling.utilization_sweep import compute_utilization


class TestFilterAssignments:

    def test_all_keeps_everything(self, scenario_assignments):
        filtered = filter_assignments(scenario_assignments, ALL_RESOURCES)

        assert filtered == scenario_assignments
        assert filtered is not scenario_assignments

    def test_single_resource(self, scenario_assignments):
        filtered = filter_assignments(scenario_assignments, "res_2")
        assert [a.id for a in filtered] == ["asg_c", "asg_d"]

    def test_unknown_resource_gives_empty_list(self, scenario_assignments):
        assert filter_assignments(scenario_assignments, "res_missing") == []

    def test_input_is_not_modified(self, scenario_assignments):
        before = list(scenario_assignments)
        filter_assignments(scenario_assignments, "res_1")
        assert scenario_assignments == before


class TestSummarize:

    def test_scenario_counts(self, resources, scenario_assignments):
        date_range = DateRange(date(2025, 2, 1), date(2025, 2, 28))
        result = compute_utilization(resources, scenario_assignments, date_range)

        summary = summarize(resources, scenario_assignments, result.utilization)

        assert summary == CalendarSummary(
            total_resources=3,
            active_assignments=3,
            over_allocated_days=6,
            skipped_assignments=0,
        )

    def test_over_allocated_days_sum_across_resources(self, resources, make_assignment):
        assignments = [
            make_assignment("a", "res_1", "2025-02-01", "2025-02-02", 120),
            make_assignment("b", "res_2", "2025-02-02", "2025-02-04", 101),
            make_assignment("c", "res_3", "2025-02-01", "2025-02-28", 100),
        ]
        result = compute_utilization(resources, assignments, DateRange(date(2025, 2, 1), date(2025, 2, 28)))

        summary = summarize(resources, assignments, result.utilization)

        assert summary.over_allocated_days == 5

    def test_active_assignments_ignore_dates(self, resources, make_assignment):
        assignments = [make_assignment("old", "res_1", "2020-01-01", "2020-01-02", 10)]

        summary = summarize(resources, assignments, {})

        assert summary.active_assignments == 1
        assert summary.over_allocated_days == 0

    def test_empty_inputs(self):
        assert summarize([], [], {}) == CalendarSummary()

    def test_to_dict(self):
        summary = CalendarSummary(total_resources=2, active_assignments=4, over_allocated_days=1)
        assert summary.to_dict() == {
            "total_resources": 2,
            "active_assignments": 4,
            "over_allocated_days": 1,
            "skipped_assignments": 0,
        }
