from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select

from rescal.storage.models import ResourceModel
from .base import BaseRepository

class ResourceRepository(BaseRepository[ResourceModel]):
    """Repository for schedulable resources."""

    model = ResourceModel
    updatable_fields = ('name', 'email')

    def list(self, session: Session, limit: int = 1000, offset: int = 0) -> List[ResourceModel]:
        stmt = select(ResourceModel).order_by(ResourceModel.name, ResourceModel.id).limit(limit).offset(offset)
        return list(session.scalars(stmt).all())

    def list_all(self, session: Session) -> List[ResourceModel]:
        """Every resource, unpaged. The calendar needs the full set."""
        stmt = select(ResourceModel).order_by(ResourceModel.name, ResourceModel.id)
        return list(session.scalars(stmt).all())
