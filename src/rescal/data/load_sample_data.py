#!/usr/bin/env python3
"""
Sample Data Loader

Loads demo resources and assignments into the Rescal database.

Usage:
    python -m rescal.data.load_sample_data [--clean] [--file FILE]

Options:
    --clean       Clear existing resources and assignments before loading
    --file        Path to a custom sample data JSON file
"""

import argparse
import json
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import delete

from rescal.platform.logging import configure_logging, get_logger
from rescal.scheduling.models import as_day
from rescal.storage.database_adapter import DatabaseAdapter, DatabaseConfig
from rescal.storage.models import AssignmentModel, ResourceModel
from rescal.storage.repositories import AssignmentRepository, ResourceRepository

logger = get_logger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "sample_data.json"


class SampleDataLoader:
    """Loads sample data into the database."""

    def __init__(self, db_adapter: DatabaseAdapter):
        self.db_adapter = db_adapter
        self.resources = ResourceRepository()
        self.assignments = AssignmentRepository()
        self.data: Optional[Dict[str, Any]] = None
        self.stats = {
            'resources': 0,
            'assignments': 0,
        }

    def load_data_file(self, filepath: Optional[Path] = None) -> Dict[str, Any]:
        """Load sample data from a JSON file."""
        filepath = Path(filepath or DEFAULT_DATA_FILE)

        with open(filepath, 'r') as f:
            self.data = json.load(f)

        logger.info(
            "Loaded sample data",
            path=str(filepath),
            resources=len(self.data.get('resources', [])),
            assignments=len(self.data.get('assignments', [])),
        )
        return self.data

    def clean(self) -> None:
        """Remove all assignments and resources."""
        with self.db_adapter.get_session() as session:
            session.execute(delete(AssignmentModel))
            session.execute(delete(ResourceModel))
        logger.info("Cleared existing resources and assignments")

    def load_all(self, clean: bool = False) -> Dict[str, int]:
        """Insert every resource and assignment from the loaded data."""
        if self.data is None:
            self.load_data_file()
        if clean:
            self.clean()

        with self.db_adapter.get_session() as session:
            for item in self.data.get('resources', []):
                self.resources.create(session, ResourceModel(
                    id=item['id'],
                    name=item['name'],
                    email=item.get('email'),
                ))
                self.stats['resources'] += 1

            self.assignments.create_many(session, [
                AssignmentModel(
                    id=item['id'],
                    resource_id=item['resource_id'],
                    resource_type=item.get('resource_type', 'user'),
                    project_id=item.get('project_id'),
                    task_id=item.get('task_id'),
                    start_date=as_day(item['start_date']),
                    end_date=as_day(item['end_date']),
                    allocation_percentage=item['allocation_percentage'],
                    is_active=item.get('is_active', True),
                )
                for item in self.data.get('assignments', [])
            ])
            self.stats['assignments'] += len(self.data.get('assignments', []))

        logger.info("Sample data loaded", **self.stats)
        return self.stats


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(
        description='Load sample resources and assignments into Rescal'
    )
    parser.add_argument(
        '--clean',
        action='store_true',
        help='Clear existing data before loading'
    )
    parser.add_argument(
        '--file',
        type=str,
        default=None,
        help='Path to custom sample data JSON file'
    )

    args = parser.parse_args(argv)

    configure_logging()

    adapter = DatabaseAdapter(DatabaseConfig())
    adapter.connect()
    adapter.create_schema()
    try:
        loader = SampleDataLoader(adapter)
        loader.load_data_file(args.file)
        loader.load_all(clean=args.clean)
    finally:
        adapter.close()


if __name__ == '__main__':
    main()
