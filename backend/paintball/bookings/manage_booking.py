from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from paintball.admin.catalog import find_package
from paintball.admin.clients import ClientNotFoundError, find_client
from paintball.bookings.conflicts import find_conflicting_booking
from paintball.bookings.create_booking import booking_addon_lines, replace_booking_addons
from paintball.bookings.errors import (
    BookingNotFoundError,
    InvalidStatusTransitionError,
    PackageNotFoundError,
    ResourceUnavailableError,
)
from paintball.bookings.quote import AddonSelectionArgs, ensure_iso_datetime, quote_for_package
from paintball.db.models import (
    BOOKING_STATUS_CANCELLED,
    BOOKING_STATUS_COMPLETED,
    BOOKING_STATUS_CONFIRMED,
    BOOKING_STATUS_PENDING,
    Booking,
)
from paintball.engine.guards import to_venue_datetime

logger = logging.getLogger("paintball.bookings.manage_booking")

STATUS_BY_ACTION = {
    "CONFIRM": BOOKING_STATUS_CONFIRMED,
    "CANCEL": BOOKING_STATUS_CANCELLED,
    "COMPLETE": BOOKING_STATUS_COMPLETED,
}

VALID_TRANSITIONS = {
    BOOKING_STATUS_PENDING: (BOOKING_STATUS_CONFIRMED, BOOKING_STATUS_CANCELLED),
    BOOKING_STATUS_CONFIRMED: (BOOKING_STATUS_CANCELLED, BOOKING_STATUS_COMPLETED),
    BOOKING_STATUS_CANCELLED: (),
    BOOKING_STATUS_COMPLETED: (),
}


class UpdateBookingArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    package_id: int | None = Field(default=None, alias="packageId")
    group_size: int | None = Field(default=None, alias="groupSize", gt=0)
    customer_name: str | None = Field(default=None, alias="customerName", min_length=1)
    customer_email: EmailStr | None = Field(default=None, alias="customerEmail")
    customer_phone: str | None = Field(default=None, alias="customerPhone")
    notes: str | None = None
    status: Literal["PENDING", "CONFIRMED", "CANCELLED", "COMPLETED"] | None = None
    resource_id: int | None = Field(default=None, alias="resourceId")
    client_id: int | None = Field(default=None, alias="clientId")
    start_iso: str | None = Field(default=None, alias="startISO")
    duration_min: int | None = Field(default=None, alias="durationMin", gt=0)
    addons: list[AddonSelectionArgs] | None = None

    @field_validator("start_iso")
    @classmethod
    def validate_start_iso(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return ensure_iso_datetime(value)

    @model_validator(mode="after")
    def validate_changes_present(self) -> "UpdateBookingArgs":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided.")
        return self


class BookingStatusArgs(BaseModel):
    action: Literal["CONFIRM", "CANCEL", "COMPLETE"]


def parse_update_booking_args(raw_args: dict[str, Any]) -> UpdateBookingArgs:
    return UpdateBookingArgs.model_validate(raw_args)


def parse_booking_status_args(raw_args: dict[str, Any]) -> BookingStatusArgs:
    return BookingStatusArgs.model_validate(raw_args)


def find_booking(db: Session, booking_id: int) -> Booking | None:
    for booking in db.query(Booking).all():
        if booking.id == booking_id:
            return booking
    return None


def list_bookings(db: Session, status: str | None = None) -> list[Booking]:
    bookings = db.query(Booking).all()
    if status:
        bookings = [b for b in bookings if str(b.status).upper() == status.upper()]
    return sorted(bookings, key=lambda b: (b.start_time, b.id))


def update_booking(db: Session, booking_id: int, args: UpdateBookingArgs) -> Booking:
    booking = find_booking(db, booking_id=booking_id)
    if booking is None:
        raise BookingNotFoundError("Booking not found.")

    changes = args.model_fields_set
    package_id = args.package_id if args.package_id is not None else booking.package_id
    package = find_package(db, package_id=package_id)
    if package is None:
        raise PackageNotFoundError("Package not found.")
    if args.client_id is not None and find_client(db, client_id=args.client_id) is None:
        raise ClientNotFoundError("Client not found.")

    start_time = (
        to_venue_datetime(args.start_iso, "start") if args.start_iso else booking.start_time
    )
    existing_duration = max(
        1, round((booking.end_time - booking.start_time).total_seconds() / 60)
    )
    duration_min = args.duration_min or existing_duration
    if args.duration_min is None and args.package_id is not None:
        duration_min = package.duration_min
    end_time = start_time + timedelta(minutes=duration_min)

    resource_id = args.resource_id if "resource_id" in changes else booking.resource_id
    if resource_id is not None:
        conflict = find_conflicting_booking(
            db=db,
            resource_id=resource_id,
            start=start_time,
            end=end_time,
            exclude_booking_id=booking.id,
        )
        if conflict is not None:
            logger.warning(
                "Conflict detected while updating booking_id=%s conflicting_booking_id=%s resource_id=%s",
                booking.id,
                conflict.id,
                resource_id,
            )
            raise ResourceUnavailableError(conflict_booking_id=conflict.id)

    if args.addons is not None:
        selections = args.addons
    else:
        selections = [
            AddonSelectionArgs(addon_id=line.addon_id, qty=line.quantity)
            for line in booking_addon_lines(db, booking_id=booking.id)
        ]
    group_size = args.group_size or booking.group_size
    quote = quote_for_package(
        db=db,
        package=package,
        group_size=group_size,
        start=start_time,
        addons=selections,
        duration_min=duration_min,
    )

    for field in ("customer_name", "customer_email", "customer_phone", "notes", "status", "client_id"):
        if field in changes:
            setattr(booking, field, getattr(args, field))
    booking.package_id = package.id
    booking.group_size = group_size
    booking.resource_id = resource_id
    booking.start_time = start_time
    booking.end_time = end_time
    booking.nocturne = quote.nocturne
    booking.total_cents = quote.total_cents
    booking.deposit_cents = quote.deposit_cents
    if args.addons is not None:
        replace_booking_addons(db=db, booking=booking, selections=args.addons)

    db.commit()
    return booking


def change_booking_status(db: Session, booking_id: int, args: BookingStatusArgs) -> Booking:
    booking = find_booking(db, booking_id=booking_id)
    if booking is None:
        raise BookingNotFoundError("Booking not found.")

    current = str(booking.status).upper()
    target = STATUS_BY_ACTION[args.action]
    if target not in VALID_TRANSITIONS.get(current, ()):
        logger.warning(
            "Invalid booking status transition booking_id=%s from=%s attempted=%s",
            booking.id,
            current,
            target,
        )
        raise InvalidStatusTransitionError(current=current, target=target)

    booking.status = target
    db.commit()
    return booking
