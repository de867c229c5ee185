"""
Reporting Periods

Calendar helpers shared by the dashboard metrics. All datetimes are naive
and expressed in UTC, matching the DateTime columns of the data store.
"""

import calendar
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

Period = Tuple[datetime, datetime]


def utcnow() -> datetime:
    """Current instant as a naive UTC datetime"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def resolve_now(now: Optional[datetime]) -> datetime:
    """Reference instant of a computation; defaults to the current UTC time"""
    return now if now is not None else utcnow()


def subtract_months(moment: datetime, months: int) -> datetime:
    """
    Shift a datetime back by whole calendar months.

    The day of month is clamped to the length of the target month, so
    31 March minus one month is the last day of February.
    """
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def start_of_month(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def month_bounds(moment: datetime) -> Period:
    """Half-open [first instant, first instant of next month) of the month"""
    start = start_of_month(moment)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def previous_month_bounds(moment: datetime) -> Period:
    """Bounds of the calendar month before the one containing moment"""
    return month_bounds(subtract_months(start_of_month(moment), 1))


def start_of_week(moment: datetime) -> datetime:
    """Midnight of the Sunday starting the week that contains moment"""
    days_since_sunday = (moment.weekday() + 1) % 7
    day = moment - timedelta(days=days_since_sunday)
    return day.replace(hour=0, minute=0, second=0, microsecond=0)


def week_bounds(moment: datetime) -> Period:
    start = start_of_week(moment)
    return start, start + timedelta(days=7)


def trailing_months(now: datetime, count: int) -> List[Period]:
    """The last `count` calendar months including the current one, oldest first"""
    return [
        month_bounds(subtract_months(start_of_month(now), offset))
        for offset in range(count - 1, -1, -1)
    ]


def trailing_weeks(now: datetime, count: int) -> List[Period]:
    """The last `count` Sunday-based weeks including the current one, oldest first"""
    current_start = start_of_week(now)
    return [
        week_bounds(current_start - timedelta(weeks=offset))
        for offset in range(count - 1, -1, -1)
    ]


def month_label(start: datetime) -> str:
    return calendar.month_abbr[start.month]


def week_label(start: datetime) -> str:
    """Label such as 'Oct 12 - Oct 18' for the week beginning at start"""
    last_day = start + timedelta(days=6)
    return (
        f"{calendar.month_abbr[start.month]} {start.day} - "
        f"{calendar.month_abbr[last_day.month]} {last_day.day}"
    )


def whole_days_between(start: datetime, end: datetime) -> int:
    """Full days from start to end, truncated toward zero"""
    return int((end - start).total_seconds() / 86400)


def hours_between(start: Optional[datetime], end: Optional[datetime]) -> float:
    """Duration in hours; intervals with a missing bound count as zero"""
    if start is None or end is None:
        return 0.0
    return (end - start).total_seconds() / 3600
