"""
Tests for over-allocation conflict checks.
"""

from datetime import date

import pytest

from rescal.scheduling.conflicts import ConflictSeverity, find_overallocations, severity_for
from rescal.scheduling.models import CalendarMonth

FEBRUARY = CalendarMonth(2025, 2).date_range


@pytest.mark.parametrize(
    "allocation,expected",
    [
        (101, ConflictSeverity.LOW),
        (105, ConflictSeverity.LOW),
        (106, ConflictSeverity.MEDIUM),
        (110, ConflictSeverity.MEDIUM),
        (111, ConflictSeverity.HIGH),
        (120, ConflictSeverity.HIGH),
        (121, ConflictSeverity.CRITICAL),
    ],
)
def test_severity_for(allocation, expected):
    assert severity_for(allocation) == expected


def test_scenario_conflicts(scenario_assignments):
    report = find_overallocations("res_1", scenario_assignments, FEBRUARY)

    assert report.has_conflicts
    assert [c.day for c in report.conflicts] == [date(2025, 2, d) for d in range(5, 11)]

    conflict = report.conflicts[0]
    assert conflict.total_allocation == 110
    assert conflict.excess == 10
    assert conflict.severity == ConflictSeverity.MEDIUM
    assert {a.id for a in conflict.assignments} == {"asg_a", "asg_b"}
    assert conflict.description == "res_1 is overallocated at 110% on 2025-02-05 (10% over capacity)"
    assert [action["type"] for action in conflict.suggested_actions] == [
        "reduce_allocation",
        "extend_timeline",
        "reassign",
    ]

    assert report.by_severity == {"low": 0, "medium": 6, "high": 0, "critical": 0}


def test_exactly_full_is_not_a_conflict(make_assignment):
    assignments = [
        make_assignment("a", "res_1", "2025-02-01", "2025-02-10", 40),
        make_assignment("b", "res_1", "2025-02-01", "2025-02-10", 60),
    ]

    report = find_overallocations("res_1", assignments, FEBRUARY)

    assert not report.has_conflicts
    assert report.by_severity == {"low": 0, "medium": 0, "high": 0, "critical": 0}


def test_exclude_assignment_being_edited(scenario_assignments, make_assignment):
    edited = make_assignment("asg_b", "res_1", "2025-02-11", "2025-02-15", 50)

    report = find_overallocations(
        "res_1",
        [a for a in scenario_assignments if a.id != "asg_b"] + [edited],
        FEBRUARY,
    )
    assert not report.has_conflicts

    # Validating an edit against stored data that still holds the old version
    report = find_overallocations("res_1", scenario_assignments, FEBRUARY, exclude_assignment_id="asg_b")
    assert not report.has_conflicts


def test_critical_conflicts(make_assignment):
    assignments = [
        make_assignment("a", "res_1", "2025-02-03", "2025-02-03", 70),
        make_assignment("b", "res_1", "2025-02-03", "2025-02-04", 60),
    ]

    report = find_overallocations("res_1", assignments, FEBRUARY)

    assert len(report.conflicts) == 1
    assert report.conflicts[0].severity == ConflictSeverity.CRITICAL
    assert report.by_severity["critical"] == 1


def test_conflicts_are_clipped_to_range(scenario_assignments):
    report = find_overallocations("res_1", scenario_assignments, CalendarMonth(2025, 3).date_range)

    assert not report.has_conflicts
