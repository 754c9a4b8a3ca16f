from datetime import date, timedelta
from typing import Iterable, Iterator, Set, Union

DateLike = Union[date, str]


def _as_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def iter_dates(start: DateLike, end: DateLike) -> Iterator[date]:
    first, last = _as_date(start), _as_date(end)
    for offset in range((last - first).days + 1):
        yield first + timedelta(days=offset)


def years_in_range(start: DateLike, end: DateLike) -> range:
    return range(_as_date(start).year, _as_date(end).year + 1)


def calculate_business_days(start: DateLike, end: DateLike, holidays: Iterable[DateLike] = ()) -> int:
    """
    Count dates in [start, end] that are neither Saturday/Sunday nor holidays.
    An inverted range counts as zero days.
    """
    holiday_set: Set[date] = set()
    for holiday in holidays:
        try:
            holiday_set.add(_as_date(holiday))
        except ValueError:
            continue  # garbled holiday cell
    return sum(
        1 for day in iter_dates(start, end)
        if day.weekday() < 5 and day not in holiday_set
    )
