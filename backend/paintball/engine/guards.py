from __future__ import annotations

import math
import re
from datetime import datetime, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

from paintball import config
from paintball.engine.errors import InputValidationError


TIME_OF_DAY_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def ensure_finite_number(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InputValidationError(name, "must be a finite number")
    if not math.isfinite(value):
        raise InputValidationError(name, "must be a finite number")


def ensure_non_negative(value: int | float, name: str) -> None:
    if value < 0:
        raise InputValidationError(name, "cannot be negative")


def ensure_integer(value: int | float, name: str) -> None:
    if isinstance(value, float) and not value.is_integer():
        raise InputValidationError(name, "must be an integer")


def ensure_count(value: Any, name: str) -> int:
    ensure_finite_number(value, name)
    ensure_non_negative(value, name)
    ensure_integer(value, name)
    return int(value)


def ensure_amount(value: Any, name: str) -> int | float:
    ensure_finite_number(value, name)
    ensure_non_negative(value, name)
    return value


def round_cents(value: int | float) -> int:
    # Half-up on non-negative amounts; round() would use banker's rounding.
    return int(math.floor(value + 0.5))


def venue_zone(tz: tzinfo | None = None) -> tzinfo:
    if tz is not None:
        return tz
    return ZoneInfo(config.VENUE_TIMEZONE)


def parse_instant(value: Any, name: str, tz: tzinfo | None = None) -> datetime:
    """Return ``value`` as a venue wall-clock datetime.

    Aware instants are converted to the venue timezone. Naive ones are
    already venue wall-clock time and are returned unchanged.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str) or not value.strip():
            raise InputValidationError(name, "must be a non-empty ISO date string")
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InputValidationError(name, "must be a valid ISO date string") from exc

    if parsed.tzinfo is None:
        return parsed
    return parsed.astimezone(venue_zone(tz))


def parse_time_of_day(value: Any, label: str) -> tuple[int, int]:
    if not isinstance(value, str) or not value.strip():
        raise InputValidationError(label, "must be a non-empty string")

    match = TIME_OF_DAY_PATTERN.match(value.strip())
    if match is None:
        raise InputValidationError(label, "must be in HH:MM format")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    if hours > 23:
        raise InputValidationError(label, "hour must be between 0 and 23")
    if minutes > 59:
        raise InputValidationError(label, "minutes must be between 0 and 59")
    return hours, minutes


def to_venue_datetime(value: Any, name: str, tz: tzinfo | None = None) -> datetime:
    parsed = parse_instant(value, name, tz=tz)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=venue_zone(tz))
    return parsed
