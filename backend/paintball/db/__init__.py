from paintball.db.base import Base
from paintball.db.models import (
    Addon,
    Booking,
    BookingAddon,
    Client,
    Package,
    Resource,
    VenueSettings,
)

__all__ = [
    "Base",
    "Addon",
    "Booking",
    "BookingAddon",
    "Client",
    "Package",
    "Resource",
    "VenueSettings",
]
