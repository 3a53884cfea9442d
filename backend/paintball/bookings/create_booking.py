from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import ConfigDict, EmailStr, Field
from sqlalchemy.orm import Session

from paintball.admin.catalog import find_package
from paintball.admin.clients import ClientNotFoundError, find_client
from paintball.bookings.conflicts import find_conflicting_booking
from paintball.bookings.errors import PackageNotFoundError, ResourceUnavailableError
from paintball.bookings.quote import AddonSelectionArgs, QuoteArgs, quote_for_package
from paintball.db.models import (
    BOOKING_STATUS_PENDING,
    Booking,
    BookingAddon,
)
from paintball.engine.guards import to_venue_datetime


logger = logging.getLogger("paintball.bookings.create_booking")


class CreateBookingArgs(QuoteArgs):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    customer_name: str = Field(alias="customerName", min_length=1)
    customer_email: EmailStr | None = Field(default=None, alias="customerEmail")
    customer_phone: str | None = Field(default=None, alias="customerPhone")
    notes: str | None = None
    duration_min: int | None = Field(default=None, alias="durationMin", gt=0)
    resource_id: int | None = Field(default=None, alias="resourceId")
    client_id: int | None = Field(default=None, alias="clientId")
    status: Literal["PENDING", "CONFIRMED", "CANCELLED", "COMPLETED"] = BOOKING_STATUS_PENDING


def parse_create_booking_args(raw_args: dict[str, Any]) -> CreateBookingArgs:
    return CreateBookingArgs.model_validate(raw_args)


def create_booking(db: Session, args: CreateBookingArgs) -> Booking:
    package = find_package(db, package_id=args.package_id)
    if package is None:
        raise PackageNotFoundError("Package not found.")
    if args.client_id is not None and find_client(db, client_id=args.client_id) is None:
        raise ClientNotFoundError("Client not found.")

    quote = quote_for_package(
        db=db,
        package=package,
        group_size=args.group_size,
        start=args.start_iso,
        addons=args.addons,
        duration_min=args.duration_min,
    )
    start_time = to_venue_datetime(args.start_iso, "start")
    end_time = quote.session_end

    if args.resource_id is not None:
        conflict = find_conflicting_booking(
            db=db,
            resource_id=args.resource_id,
            start=start_time,
            end=end_time,
        )
        if conflict is not None:
            logger.warning(
                "Resource conflict resource_id=%s conflicting_booking_id=%s",
                args.resource_id,
                conflict.id,
            )
            raise ResourceUnavailableError(conflict_booking_id=conflict.id)

    booking = Booking(
        package_id=package.id,
        resource_id=args.resource_id,
        client_id=args.client_id,
        group_size=args.group_size,
        customer_name=args.customer_name,
        customer_email=args.customer_email,
        customer_phone=args.customer_phone,
        notes=args.notes,
        start_time=start_time,
        end_time=end_time,
        nocturne=quote.nocturne,
        status=args.status,
        total_cents=quote.total_cents,
        deposit_cents=quote.deposit_cents,
    )
    db.add(booking)
    db.flush()

    replace_booking_addons(db=db, booking=booking, selections=args.addons)
    db.commit()
    return booking


def replace_booking_addons(
    db: Session,
    booking: Booking,
    selections: list[AddonSelectionArgs],
) -> None:
    for line in booking_addon_lines(db, booking_id=booking.id):
        db.delete(line)
    for selection in selections:
        db.add(
            BookingAddon(
                booking_id=booking.id,
                addon_id=selection.addon_id,
                quantity=selection.qty,
            )
        )


def booking_addon_lines(db: Session, booking_id: int) -> list[BookingAddon]:
    return [row for row in db.query(BookingAddon).all() if row.booking_id == booking_id]


def serialize_booking(booking: Booking, addon_lines: list[BookingAddon] | None = None) -> dict[str, Any]:
    return {
        "id": booking.id,
        "packageId": booking.package_id,
        "resourceId": booking.resource_id,
        "clientId": booking.client_id,
        "groupSize": booking.group_size,
        "customerName": booking.customer_name,
        "customerEmail": booking.customer_email,
        "customerPhone": booking.customer_phone,
        "notes": booking.notes,
        "startISO": booking.start_time.isoformat(),
        "endISO": booking.end_time.isoformat(),
        "nocturne": bool(booking.nocturne),
        "status": booking.status,
        "totalCents": booking.total_cents,
        "depositCents": booking.deposit_cents,
        "addons": [
            {"addonId": line.addon_id, "qty": line.quantity} for line in (addon_lines or [])
        ],
    }
