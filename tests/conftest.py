"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import date
from typing import Union

import pytest

sys.path.append(os.path.join(os.getcwd(), "src"))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("METRICS_ENABLED", "true")

from rescal.scheduling.models import Resource, ResourceAssignment, as_day  # noqa: E402


def create_assignment(
    assignment_id: str,
    resource_id: str,
    start: Union[str, date],
    end: Union[str, date],
    allocation: float,
    is_active: bool = True,
    project_id: str = "proj_1",
    **extra,
) -> ResourceAssignment:
    """Helper to build assignments from ISO day strings."""
    return ResourceAssignment(
        id=assignment_id,
        resource_id=resource_id,
        start_date=as_day(start),
        end_date=as_day(end),
        allocation_percentage=allocation,
        is_active=is_active,
        project_id=project_id,
        **extra,
    )


@pytest.fixture
def make_assignment():
    """Fixture to create assignments."""
    return create_assignment


@pytest.fixture
def resources():
    """Three schedulable people."""
    return [
        Resource(id="res_1", name="Alice Moreno", email="alice@example.com"),
        Resource(id="res_2", name="Bob Okafor", email="bob@example.com"),
        Resource(id="res_3", name="Carol Lindqvist"),
    ]


@pytest.fixture
def scenario_assignments():
    """
    res_1: A 60% Feb 1-10 and B 50% Feb 5-15 (2025).
    res_2: 80% from late January into early February.
    """
    return [
        create_assignment("asg_a", "res_1", "2025-02-01", "2025-02-10", 60),
        create_assignment("asg_b", "res_1", "2025-02-05", "2025-02-15", 50),
        create_assignment("asg_c", "res_2", "2025-01-25", "2025-02-05", 80),
        create_assignment("asg_d", "res_2", "2025-02-03", "2025-02-20", 40, is_active=False),
    ]


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
