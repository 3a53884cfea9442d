from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from paintball.db.models import BLOCKING_BOOKING_STATUSES, Booking
from paintball.engine.guards import venue_zone


def intervals_overlap(
    start_a: datetime,
    end_a: datetime,
    start_b: datetime,
    end_b: datetime,
) -> bool:
    return start_a < end_b and start_b < end_a


def find_conflicting_booking(
    db: Session,
    resource_id: int,
    start: datetime,
    end: datetime,
    exclude_booking_id: int | None = None,
) -> Booking | None:
    bookings = [
        b
        for b in db.query(Booking).all()
        if b.resource_id == resource_id and b.id != exclude_booking_id
    ]
    return first_conflict(bookings, start=start, end=end)


def first_conflict(bookings: list[Any], start: datetime, end: datetime) -> Any | None:
    """Return the earliest PENDING or CONFIRMED booking overlapping the window."""
    start = _ensure_aware(start)
    end = _ensure_aware(end)
    for booking in sorted(bookings, key=lambda b: _ensure_aware(b.start_time)):
        if str(getattr(booking, "status", "") or "").upper() not in BLOCKING_BOOKING_STATUSES:
            continue
        if intervals_overlap(
            start,
            end,
            _ensure_aware(booking.start_time),
            _ensure_aware(booking.end_time),
        ):
            return booking
    return None


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=venue_zone())
    return value
