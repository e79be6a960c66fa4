"""
Scheduling data model.

Resources and assignments are immutable inputs for a computation; the
calendar month and date range types describe the window being viewed.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Tuple, Union

from .errors import InvalidDateRange

# Resource filter value meaning "every resource"
ALL_RESOURCES = "all"

DayLike = Union[date, datetime, str]


def as_day(value: DayLike) -> date:
    """
    Coerce a day-precision timestamp to a calendar day.

    Accepts dates, datetimes (time part dropped) and ISO-8601 strings,
    including a trailing 'Z'.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
    raise TypeError(f"Cannot interpret {value!r} as a calendar day")


@dataclass(frozen=True)
class Resource:
    """A person or unit whose time is scheduled."""
    id: str
    name: str
    email: Optional[str] = None


@dataclass(frozen=True)
class ResourceAssignment:
    """A date-bounded commitment of a percentage of a resource's capacity."""
    id: str
    resource_id: str
    start_date: date
    end_date: date
    allocation_percentage: float
    is_active: bool = True
    project_id: Optional[str] = None
    task_id: Optional[str] = None
    resource_type: str = "user"
    created_at: Optional[datetime] = None

    def __post_init__(self):
        # Stored dates may arrive as day-precision timestamps or ISO strings
        for name in ('start_date', 'end_date'):
            value = getattr(self, name)
            if isinstance(value, (datetime, str)):
                try:
                    object.__setattr__(self, name, as_day(value))
                except ValueError:
                    # Left as-is; check_assignment reports it as malformed
                    pass


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days."""
    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidDateRange(
                f"Range start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    @classmethod
    def from_strings(cls, start: str, end: str) -> "DateRange":
        return cls(as_day(start), as_day(end))

    @property
    def days(self) -> int:
        """Number of days in the range."""
        return (self.end - self.start).days + 1

    def offset(self, day: date) -> int:
        return (day - self.start).days

    def day_at(self, offset: int) -> date:
        return self.start + timedelta(days=offset)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def clip(self, start: date, end: date) -> Optional[Tuple[date, date]]:
        """
        Intersect [start, end] with this range.

        Returns None when the interval lies entirely outside the range.
        """
        if end < self.start or start > self.end:
            return None
        return max(start, self.start), min(end, self.end)

    def __iter__(self) -> Iterator[date]:
        for i in range(self.days):
            yield self.day_at(i)

    def __len__(self) -> int:
        return self.days


@dataclass(frozen=True)
class CalendarMonth:
    """A calendar month identified by year and month number."""
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be in 1..12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"Year must be in 1..9999, got {self.year}")

    @classmethod
    def from_date(cls, day: date) -> "CalendarMonth":
        return cls(day.year, day.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        _, days_in_month = calendar.monthrange(self.year, self.month)
        return date(self.year, self.month, days_in_month)

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.first_day, self.last_day)

    @property
    def label(self) -> str:
        """Display label, e.g. 'February 2025'."""
        return f"{calendar.month_name[self.month]} {self.year}"

    def previous(self) -> "CalendarMonth":
        if self.month == 1:
            return CalendarMonth(self.year - 1, 12)
        return CalendarMonth(self.year, self.month - 1)

    def next(self) -> "CalendarMonth":
        if self.month == 12:
            return CalendarMonth(self.year + 1, 1)
        return CalendarMonth(self.year, self.month + 1)
