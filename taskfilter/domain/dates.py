"""Date helpers shared by the date-shaped filter operators.

Values are ISO-ish strings as stored on task records: ``YYYY-MM-DD`` or a
date-time such as ``YYYY-MM-DDTHH:MM[:SS][Z|+HH:MM]``, where a
space may stand in for the ``T``. Naive date-times are read as local time.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_COMPONENT = re.compile(r"\d[T ]\d{2}:\d{2}")

_WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
_UNITS = ("day", "week", "month", "year")

_IN_N_UNITS = re.compile(r"^in (\d+) (day|week|month|year)s?$")
_N_UNITS_AGO = re.compile(r"^(\d+) (day|week|month|year)s? ago$")
_NEXT_OR_LAST = re.compile(r"^(next|last) (\w+)$")


def has_time_component(value: str) -> bool:
    return bool(_TIME_COMPONENT.search(value))


def parse_date_value(value: str) -> date | datetime:
    """Parse a stored date or date-time string. Raises ``ValueError``."""
    if not isinstance(value, str):
        raise ValueError(f"Expected a date string, got {type(value).__name__}")
    text = value.strip()
    if not text:
        raise ValueError("Empty date value")
    if has_time_component(text):
        return datetime.fromisoformat(text)
    if not _DATE_ONLY.match(text):
        raise ValueError(f"Unrecognised date value: {value!r}")
    return date.fromisoformat(text)


def date_part(value: str) -> str:
    """Return the calendar date as written, ignoring time of day and offset."""
    parsed = parse_date_value(value)
    if isinstance(parsed, datetime):
        return parsed.date().isoformat()
    return parsed.isoformat()


def is_same_date_safe(first: str, second: str) -> bool:
    try:
        return date_part(first) == date_part(second)
    except ValueError:
        return False


def is_before_time_aware(first: str, second: str) -> bool:
    """True if ``first`` is strictly before ``second``.

    When exactly one side carries a time of day, the date-only side stands
    for the end of its day, so ``2025-01-10`` is not before ``2025-01-10T09:00``.
    """
    first_has_time = has_time_component(first)
    second_has_time = has_time_component(second)

    if not first_has_time and not second_has_time:
        return parse_date_value(first) < parse_date_value(second)

    return _as_instant(first, end_of_day=True) < _as_instant(second, end_of_day=True)


def _as_instant(value: str, end_of_day: bool) -> datetime:
    parsed = parse_date_value(value)
    if isinstance(parsed, datetime):
        return parsed.astimezone(timezone.utc)
    moment = datetime.combine(parsed, time.max if end_of_day else time.min)
    return moment.astimezone(timezone.utc)


def is_natural_language_date(value: object) -> bool:
    if not isinstance(value, str):
        return False
    return _resolve(_normalize(value), date.today()) is not None


def resolve_natural_language_date(value: str, today: date | None = None) -> str:
    """Resolve expressions like ``tomorrow`` or ``in 3 days`` to ``YYYY-MM-DD``.

    Anything unrecognised is returned unchanged.
    """
    if not isinstance(value, str):
        return value
    resolved = _resolve(_normalize(value), today or date.today())
    return resolved.isoformat() if resolved else value


def _normalize(value: str) -> str:
    return " ".join(value.strip().lower().replace("-", " ").replace("_", " ").split())


def _resolve(expr: str, today: date) -> date | None:
    if expr == "today":
        return today
    if expr == "tomorrow":
        return today + timedelta(days=1)
    if expr == "yesterday":
        return today - timedelta(days=1)

    match = _IN_N_UNITS.match(expr)
    if match:
        return _shift(today, match.group(2), int(match.group(1)))

    match = _N_UNITS_AGO.match(expr)
    if match:
        return _shift(today, match.group(2), -int(match.group(1)))

    match = _NEXT_OR_LAST.match(expr)
    if match:
        direction = 1 if match.group(1) == "next" else -1
        target = match.group(2)
        if target in _UNITS:
            return _shift(today, target, direction)
        if target in _WEEKDAYS:
            weekday = _WEEKDAYS.index(target)
            if direction > 0:
                return today + timedelta(days=(weekday - today.weekday() - 1) % 7 + 1)
            return today - timedelta(days=(today.weekday() - weekday - 1) % 7 + 1)

    return None


def _shift(base: date, unit: str, amount: int) -> date:
    if unit == "day":
        return base + timedelta(days=amount)
    if unit == "week":
        return base + timedelta(weeks=amount)
    if unit == "month":
        return _add_months(base, amount)
    return _add_months(base, amount * 12)


def _add_months(base: date, months: int) -> date:
    year = base.year + (base.month - 1 + months) // 12
    month = (base.month - 1 + months) % 12 + 1
    day = min(base.day, _days_in_month(year, month))
    return date(year, month, day)


def _days_in_month(year: int, month: int) -> int:
    if month == 12:
        next_month = date(year + 1, 1, 1)
    else:
        next_month = date(year, month + 1, 1)
    return (next_month - timedelta(days=1)).day
