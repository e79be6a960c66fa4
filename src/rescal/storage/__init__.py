"""Rescal Storage Layer - Relational persistence for resources and assignments."""

from .base import StorageAdapter
from .database_adapter import DatabaseAdapter, DatabaseConfig
from .models import (
    AssignmentModel,
    Base,
    ResourceModel,
)

__all__ = [
    "StorageAdapter",
    "DatabaseAdapter",
    "DatabaseConfig",
    "Base",
    "ResourceModel",
    "AssignmentModel",
]
