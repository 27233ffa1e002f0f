"""
Streak Logic - daily answering streaks.

This module contains ONLY pure Python logic.
NO database, NO Flask, NO model dependencies allowed.
"""
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Set, Tuple, Union

DateLike = Union[date, datetime, str, None]


def answer_days(values: Iterable[DateLike]) -> Set[date]:
    """Distinct calendar days among dates, datetimes or ISO strings. Unparseable values are skipped."""
    days: Set[date] = set()
    for value in values:
        day = _to_date(value)
        if day is not None:
            days.add(day)
    return days


def current_streak(values: Iterable[DateLike], today: Optional[date] = None) -> int:
    """
    Consecutive answering days ending today, or yesterday if nothing was answered today yet.

    >>> current_streak([date(2024, 1, 3), date(2024, 1, 2), date(2024, 1, 1)], today=date(2024, 1, 3))
    3
    >>> current_streak([date(2024, 1, 3), date(2024, 1, 1)], today=date(2024, 1, 3))
    1
    """
    days = answer_days(values)
    if not days:
        return 0

    today = today or date.today()
    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(values: Iterable[DateLike]) -> int:
    days = sorted(answer_days(values))
    best = run = 0
    previous = None
    for day in days:
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        best = max(best, run)
        previous = day
    return best


def streaks(values: Iterable[DateLike], today: Optional[date] = None) -> Tuple[int, int]:
    """(current, longest)."""
    values = list(values)
    return current_streak(values, today), longest_streak(values)


def _to_date(value: DateLike) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value).date()
        except ValueError:
            return None
    return None
