from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from paintball import config
from paintball.admin.catalog import find_package
from paintball.admin.settings import get_venue_settings, opening_window_for
from paintball.bookings.conflicts import first_conflict
from paintball.bookings.errors import PackageNotFoundError
from paintball.db.models import Booking
from paintball.engine import generate_slots, is_nocturne
from paintball.engine.quote import threshold_label


class AvailabilityArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    package_id: int = Field(alias="packageId")
    resource_id: int | None = Field(default=None, alias="resourceId")


def parse_availability_args(raw_args: dict[str, Any]) -> AvailabilityArgs:
    return AvailabilityArgs.model_validate(raw_args)


def list_available_slots(db: Session, args: AvailabilityArgs) -> list[dict[str, Any]]:
    package = find_package(db, package_id=args.package_id)
    if package is None:
        raise PackageNotFoundError("Package not found.")

    settings = get_venue_settings(db)
    window = opening_window_for(settings, args.day)
    if window.closed:
        return []

    candidates = generate_slots(
        duration_min=package.duration_min,
        open=window.open,
        close=window.close,
        step_min=config.SLOT_STEP_MINUTES,
        on=args.day,
    )

    existing: list[Booking] = []
    if args.resource_id is not None:
        existing = [b for b in db.query(Booking).all() if b.resource_id == args.resource_id]

    threshold = threshold_label(settings.nocturne_threshold)
    duration = timedelta(minutes=package.duration_min)
    slots = []
    for start in candidates:
        end = start + duration
        if existing and first_conflict(existing, start=start, end=end) is not None:
            continue
        slots.append(
            {
                "startISO": start.isoformat(),
                "endISO": end.isoformat(),
                "nocturne": is_nocturne(start, threshold),
            }
        )
    return slots
