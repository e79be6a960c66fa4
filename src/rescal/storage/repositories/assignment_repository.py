from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select
import logging

from rescal.storage.models import AssignmentModel
from .base import BaseRepository

logger = logging.getLogger(__name__)

class AssignmentRepository(BaseRepository[AssignmentModel]):
    """Repository for resource assignments."""

    model = AssignmentModel
    # Columns callers may change through update()
    updatable_fields = (
        'resource_id',
        'resource_type',
        'project_id',
        'task_id',
        'start_date',
        'end_date',
        'allocation_percentage',
        'is_active',
    )

    def create_many(self, session: Session, entities: List[AssignmentModel]) -> List[AssignmentModel]:
        session.add_all(entities)
        session.flush()
        logger.info(f"Created {len(entities)} resource assignments")
        return entities

    def list(self, session: Session, limit: int = 1000, offset: int = 0) -> List[AssignmentModel]:
        stmt = select(AssignmentModel).order_by(AssignmentModel.created_at.desc()).limit(limit).offset(offset)
        return list(session.scalars(stmt).all())

    # --- Scoped queries ---

    def _list_where(self, session: Session, *criteria) -> List[AssignmentModel]:
        stmt = (
            select(AssignmentModel)
            .where(*criteria)
            .order_by(AssignmentModel.created_at.desc(), AssignmentModel.id)
        )
        return list(session.scalars(stmt).all())

    def list_by_project(self, session: Session, project_id: str) -> List[AssignmentModel]:
        return self._list_where(session, AssignmentModel.project_id == project_id)

    def list_by_resource(self, session: Session, resource_id: str) -> List[AssignmentModel]:
        return self._list_where(session, AssignmentModel.resource_id == resource_id)

    def list_by_task(self, session: Session, task_id: str) -> List[AssignmentModel]:
        return self._list_where(session, AssignmentModel.task_id == task_id)
