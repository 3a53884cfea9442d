from paintball.bookings.availability import list_available_slots, parse_availability_args
from paintball.bookings.conflicts import find_conflicting_booking, intervals_overlap
from paintball.bookings.create_booking import (
    create_booking,
    parse_create_booking_args,
    serialize_booking,
)
from paintball.bookings.manage_booking import (
    change_booking_status,
    list_bookings,
    parse_booking_status_args,
    parse_update_booking_args,
    update_booking,
)
from paintball.bookings.quote import parse_quote_args, quote_booking

__all__ = [
    "list_available_slots",
    "parse_availability_args",
    "find_conflicting_booking",
    "intervals_overlap",
    "create_booking",
    "parse_create_booking_args",
    "serialize_booking",
    "change_booking_status",
    "list_bookings",
    "parse_booking_status_args",
    "parse_update_booking_args",
    "update_booking",
    "parse_quote_args",
    "quote_booking",
]
