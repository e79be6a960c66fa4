from rescal.api.database import get_database_adapter, close_database_adapter
from rescal.scheduling.sources import ScheduleSource, SqlScheduleSource


def get_schedule_source() -> ScheduleSource:
    return SqlScheduleSource(get_database_adapter())


async def init_resources() -> None:
    """Initialize the database connection and schema."""
    adapter = get_database_adapter()
    adapter.connect()
    adapter.create_schema()


async def close_resources() -> None:
    """Close all resources."""
    close_database_adapter()


__all__ = [
    "get_database_adapter",
    "get_schedule_source",
    "init_resources",
    "close_resources",
]
