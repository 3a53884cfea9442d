from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time as dt_time, timedelta, tzinfo
from typing import Any

from paintball.engine.errors import InputValidationError
from paintball.engine.guards import (
    ensure_finite_number,
    parse_instant,
    parse_time_of_day,
    venue_zone,
)


DEFAULT_OPEN = "09:00"
DEFAULT_CLOSE = "22:00"
DEFAULT_STEP_MINUTES = 30
DEFAULT_NOCTURNE_THRESHOLD = "20:00"


@dataclass(frozen=True)
class OpeningWindow:
    open: str
    close: str
    closed: bool = False


def generate_slots(
    *,
    duration_min: int | float,
    open: str = DEFAULT_OPEN,
    close: str = DEFAULT_CLOSE,
    step_min: int | float = DEFAULT_STEP_MINUTES,
    on: date | None = None,
    tz: tzinfo | None = None,
) -> list[datetime]:
    """Return every start time on ``on`` whose session ends by ``close``.

    Times are venue wall-clock times on the given calendar date, which
    defaults to today in the venue timezone.
    """
    _ensure_positive(duration_min, "duration_min")
    _ensure_positive(step_min, "step_min")

    open_hours, open_minutes = parse_time_of_day(open, "open")
    close_hours, close_minutes = parse_time_of_day(close, "close")

    zone = venue_zone(tz)
    day = on or datetime.now(zone).date()
    start_boundary = datetime.combine(day, dt_time(open_hours, open_minutes), tzinfo=zone)
    end_boundary = datetime.combine(day, dt_time(close_hours, close_minutes), tzinfo=zone)
    if start_boundary >= end_boundary:
        return []

    duration = timedelta(minutes=duration_min)
    step = timedelta(minutes=step_min)

    slots: list[datetime] = []
    cursor = start_boundary
    while cursor < end_boundary:
        if cursor + duration > end_boundary:
            break
        slots.append(cursor)
        cursor += step
    return slots


def is_nocturne(
    start: str | datetime,
    threshold: str = DEFAULT_NOCTURNE_THRESHOLD,
    tz: tzinfo | None = None,
) -> bool:
    if not isinstance(start, datetime) and (not isinstance(start, str) or not start.strip()):
        raise InputValidationError("start", "must be a non-empty ISO string")

    local_start = parse_instant(start, "start", tz=tz)
    threshold_hours, threshold_minutes = parse_time_of_day(threshold, "threshold")
    start_total_minutes = local_start.hour * 60 + local_start.minute
    return start_total_minutes >= threshold_hours * 60 + threshold_minutes


def _ensure_positive(value: Any, name: str) -> None:
    try:
        ensure_finite_number(value, name)
    except InputValidationError as exc:
        raise InputValidationError(name, "must be a positive number") from exc
    if value <= 0:
        raise InputValidationError(name, "must be a positive number")
