"""
Schedule sources.

A ScheduleSource is the persistence collaborator the calendar awaits: it
returns immutable snapshots of resources and assignments. Failures of any
kind surface as FetchFailure.
"""

import asyncio
import logging
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from rescal.storage.database_adapter import DatabaseAdapter
from rescal.storage.models import AssignmentModel, ResourceModel
from rescal.storage.repositories import AssignmentRepository, ResourceRepository

from .errors import FetchFailure
from .models import Resource, ResourceAssignment, as_day

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScheduleSource(Protocol):
    """Read interface onto stored resources and assignments."""

    async def list_resources(self) -> Sequence[Resource]:
        ...

    async def list_assignments(self, project_id: str) -> Sequence[ResourceAssignment]:
        ...

    async def list_resource_assignments(self, resource_id: str) -> Sequence[ResourceAssignment]:
        ...


def to_resource(model: ResourceModel) -> Resource:
    return Resource(id=model.id, name=model.name, email=model.email)


def to_assignment(model: AssignmentModel) -> ResourceAssignment:
    return ResourceAssignment(
        id=model.id,
        resource_id=model.resource_id,
        start_date=as_day(model.start_date),
        end_date=as_day(model.end_date),
        allocation_percentage=model.allocation_percentage,
        is_active=bool(model.is_active),
        project_id=model.project_id,
        task_id=model.task_id,
        resource_type=model.resource_type or "user",
        created_at=model.created_at,
    )


class InMemoryScheduleSource:
    """
    Source backed by plain sequences.

    Used for demos, tests and callers that already hold the records.
    """

    def __init__(
        self,
        resources: Iterable[Resource] = (),
        assignments: Iterable[ResourceAssignment] = (),
    ):
        self._resources = tuple(resources)
        self._assignments = tuple(assignments)

    async def list_resources(self) -> Sequence[Resource]:
        return list(self._resources)

    async def list_assignments(self, project_id: str) -> Sequence[ResourceAssignment]:
        return [a for a in self._assignments if a.project_id == project_id]

    async def list_resource_assignments(self, resource_id: str) -> Sequence[ResourceAssignment]:
        return [a for a in self._assignments if a.resource_id == resource_id]


class SqlScheduleSource:
    """
    Source backed by the relational store.

    Blocking session work runs in a worker thread so the event loop keeps
    serving other requests while a load is pending.
    """

    def __init__(
        self,
        adapter: DatabaseAdapter,
        resource_repository: Optional[ResourceRepository] = None,
        assignment_repository: Optional[AssignmentRepository] = None,
    ):
        self.adapter = adapter
        self.resources = resource_repository or ResourceRepository()
        self.assignments = assignment_repository or AssignmentRepository()

    async def _run(self, what: str, fn: Callable[[], T], project_id: Optional[str] = None) -> T:
        try:
            return await asyncio.to_thread(fn)
        except (SQLAlchemyError, ConnectionError) as e:
            logger.error(f"Failed to load {what}: {e}")
            raise FetchFailure(f"Failed to load {what}: {e}", project_id=project_id) from e

    async def list_resources(self) -> List[Resource]:
        def load() -> List[Resource]:
            with self.adapter.get_session() as session:
                return [to_resource(m) for m in self.resources.list_all(session)]

        return await self._run("resources", load)

    async def list_assignments(self, project_id: str) -> List[ResourceAssignment]:
        def load() -> List[ResourceAssignment]:
            with self.adapter.get_session() as session:
                return [to_assignment(m) for m in self.assignments.list_by_project(session, project_id)]

        return await self._run(f"assignments for project {project_id}", load, project_id=project_id)

    async def list_resource_assignments(self, resource_id: str) -> List[ResourceAssignment]:
        def load() -> List[ResourceAssignment]:
            with self.adapter.get_session() as session:
                return [to_assignment(m) for m in self.assignments.list_by_resource(session, resource_id)]

        return await self._run(f"assignments for resource {resource_id}", load)


async def fetch_project_schedule(
    source: ScheduleSource,
    project_id: str,
) -> Tuple[List[Resource], List[ResourceAssignment]]:
    """
    Load resources and a project's assignments concurrently.

    Raises:
        FetchFailure: if either load fails
    """
    try:
        resources, assignments = await asyncio.gather(
            source.list_resources(),
            source.list_assignments(project_id),
        )
    except FetchFailure:
        raise
    except Exception as e:
        raise FetchFailure(f"Failed to load schedule for project {project_id}: {e}", project_id=project_id) from e
    return list(resources), list(assignments)
