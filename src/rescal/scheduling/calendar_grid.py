"""
Calendar grid layout.

Produces the cells of a month laid out in fixed 7-column weeks starting on
Sunday: leading blanks (None) followed by every day of the month.
"""

from datetime import date
from typing import List, Optional

from .models import CalendarMonth

WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def sunday_weekday_index(day: date) -> int:
    """Weekday index with Sunday as 0."""
    # date.weekday() counts from Monday
    return (day.weekday() + 1) % 7


def generate(month: CalendarMonth) -> List[Optional[date]]:
    """Return the grid cells for a month."""
    date_range = month.date_range
    cells: List[Optional[date]] = [None] * sunday_weekday_index(date_range.start)
    cells.extend(date_range)
    return cells


def weeks(cells: List[Optional[date]]) -> List[List[Optional[date]]]:
    """Split grid cells into rows of seven, padding the last row with blanks."""
    rows = [cells[i:i + 7] for i in range(0, len(cells), 7)]
    if rows and len(rows[-1]) < 7:
        rows[-1] = rows[-1] + [None] * (7 - len(rows[-1]))
    return rows
