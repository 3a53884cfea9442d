from __future__ import annotations

import re
from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from sqlalchemy.orm import Session

from paintball.db.models import SETTINGS_ID, VenueSettings
from paintball.engine.rules import (
    DepositConfig,
    FixedDeposit,
    NoDeposit,
    PercentDeposit,
    PricingRules,
)
from paintball.engine.slots import OpeningWindow


DAY_KEYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

DEFAULT_OPENING_HOURS: dict[str, dict[str, Any]] = {
    "monday": {"open": "09:00", "close": "18:00", "closed": False},
    "tuesday": {"open": "09:00", "close": "18:00", "closed": False},
    "wednesday": {"open": "09:00", "close": "18:00", "closed": False},
    "thursday": {"open": "09:00", "close": "18:00", "closed": False},
    "friday": {"open": "09:00", "close": "18:00", "closed": False},
    "saturday": {"open": "09:00", "close": "19:00", "closed": False},
    "sunday": {"open": "10:00", "close": "17:00", "closed": True},
}


class DayScheduleArgs(BaseModel):
    open: str = Field(pattern=TIME_PATTERN)
    close: str = Field(pattern=TIME_PATTERN)
    closed: bool

    @model_validator(mode="after")
    def validate_close_after_open(self) -> "DayScheduleArgs":
        if not self.closed and self.open >= self.close:
            raise ValueError("Closing time must be after opening time.")
        return self


class OpeningHoursArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    monday: DayScheduleArgs
    tuesday: DayScheduleArgs
    wednesday: DayScheduleArgs
    thursday: DayScheduleArgs
    friday: DayScheduleArgs
    saturday: DayScheduleArgs
    sunday: DayScheduleArgs


class UpdateSettingsArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    nocturne_threshold: int = Field(alias="nocturneThreshold", ge=0, le=23)
    nocturne_per_person_cents: int = Field(default=400, alias="nocturnePerPersonCents", ge=0)
    min_players: int = Field(alias="minPlayers", ge=1)
    penalty_under_min_cents: int = Field(alias="penaltyUnderMinCents", ge=0)
    opening_hours: OpeningHoursArgs = Field(alias="openingHours")
    stripe_enabled: bool = Field(alias="stripeEnabled")
    deposit_type: Literal["NONE", "FIXED", "PERCENT"] = Field(alias="depositType")
    deposit_fixed_cents: int | None = Field(default=None, alias="depositFixedCents", ge=0)
    deposit_percent: int | None = Field(default=None, alias="depositPercent", ge=0, le=100)

    @model_validator(mode="after")
    def validate_deposit(self) -> "UpdateSettingsArgs":
        if self.deposit_type == "FIXED" and self.deposit_fixed_cents is None:
            raise ValueError("depositFixedCents is required for a fixed deposit.")
        if self.deposit_type == "PERCENT":
            if not self.stripe_enabled:
                raise ValueError("Online payment must be enabled for a percentage deposit.")
            if self.deposit_percent is None:
                raise ValueError("depositPercent is required for a percentage deposit.")
        return self


def get_venue_settings(db: Session) -> VenueSettings:
    for row in db.query(VenueSettings).all():
        if row.id == SETTINGS_ID:
            return row

    settings = VenueSettings(
        id=SETTINGS_ID,
        nocturne_threshold=20,
        nocturne_per_person_cents=400,
        min_players=8,
        penalty_under_min_cents=2500,
        opening_hours_json=normalize_opening_hours(None),
        stripe_enabled=False,
        deposit_type="NONE",
        deposit_fixed_cents=None,
        deposit_percent=None,
    )
    db.add(settings)
    db.commit()
    return settings


def update_venue_settings(db: Session, args: UpdateSettingsArgs) -> VenueSettings:
    settings = get_venue_settings(db)

    settings.nocturne_threshold = args.nocturne_threshold
    settings.nocturne_per_person_cents = args.nocturne_per_person_cents
    settings.min_players = args.min_players
    settings.penalty_under_min_cents = args.penalty_under_min_cents
    settings.opening_hours_json = args.opening_hours.model_dump()
    settings.stripe_enabled = args.stripe_enabled
    settings.deposit_type = args.deposit_type
    settings.deposit_fixed_cents = None
    settings.deposit_percent = None
    if args.deposit_type == "FIXED":
        settings.deposit_fixed_cents = args.deposit_fixed_cents or 0
    elif args.deposit_type == "PERCENT":
        settings.deposit_percent = args.deposit_percent or 0
    db.commit()
    return settings


def normalize_opening_hours(value: Any) -> dict[str, dict[str, Any]]:
    source = value if isinstance(value, dict) else {}
    result: dict[str, dict[str, Any]] = {}
    for day in DAY_KEYS:
        fallback = DEFAULT_OPENING_HOURS[day]
        entry = source.get(day)
        if not isinstance(entry, dict):
            result[day] = dict(fallback)
            continue
        result[day] = {
            "open": _normalize_time(entry.get("open"), fallback["open"]),
            "close": _normalize_time(entry.get("close"), fallback["close"]),
            "closed": entry["closed"] if isinstance(entry.get("closed"), bool) else fallback["closed"],
        }
    return result


def opening_window_for(settings: VenueSettings, day: date) -> OpeningWindow:
    schedule = normalize_opening_hours(settings.opening_hours_json)[DAY_KEYS[day.weekday()]]
    return OpeningWindow(
        open=schedule["open"],
        close=schedule["close"],
        closed=schedule["closed"],
    )


def deposit_config_for(settings: VenueSettings) -> DepositConfig:
    deposit_type = (settings.deposit_type or "NONE").upper()
    if deposit_type == "FIXED":
        return FixedDeposit(amount_cents=max(0, settings.deposit_fixed_cents or 0))
    if deposit_type == "PERCENT":
        return PercentDeposit(
            percent=max(0, min(100, settings.deposit_percent or 0)),
            online_payment_enabled=bool(settings.stripe_enabled),
        )
    return NoDeposit()


def pricing_rules_for(settings: VenueSettings) -> PricingRules:
    return PricingRules(
        nocturne_threshold_hour=_pick_int(settings.nocturne_threshold, 20),
        min_players=_pick_int(settings.min_players, 8),
        penalty_per_missing_player_cents=_pick_int(settings.penalty_under_min_cents, 2500),
        nocturne_per_person_cents=_pick_int(settings.nocturne_per_person_cents, 400),
        deposit=deposit_config_for(settings),
    )


def serialize_settings(settings: VenueSettings) -> dict[str, Any]:
    return {
        "id": settings.id,
        "nocturneThreshold": settings.nocturne_threshold,
        "nocturnePerPersonCents": settings.nocturne_per_person_cents,
        "minPlayers": settings.min_players,
        "penaltyUnderMinCents": settings.penalty_under_min_cents,
        "openingHours": normalize_opening_hours(settings.opening_hours_json),
        "stripeEnabled": bool(settings.stripe_enabled),
        "depositType": settings.deposit_type,
        "depositFixedCents": settings.deposit_fixed_cents,
        "depositPercent": settings.deposit_percent,
        "createdAt": _isoformat(getattr(settings, "created_at", None)),
        "updatedAt": _isoformat(getattr(settings, "updated_at", None)),
    }


def _normalize_time(value: Any, fallback: str) -> str:
    if isinstance(value, str) and re.match(TIME_PATTERN, value):
        return value
    return fallback


def _pick_int(value: Any, fallback: int) -> int:
    if value is None:
        return fallback
    return int(value)


def _isoformat(value: Any) -> str | None:
    return value.isoformat() if value is not None else None
