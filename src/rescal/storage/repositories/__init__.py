from .base import BaseRepository
from .resource_repository import ResourceRepository
from .assignment_repository import AssignmentRepository

__all__ = [
    "BaseRepository",
    "ResourceRepository",
    "AssignmentRepository",
]
