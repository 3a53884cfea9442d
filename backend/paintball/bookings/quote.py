from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from sqlalchemy.orm import Session

from paintball.admin.catalog import find_package
from paintball.admin.settings import get_venue_settings, pricing_rules_for
from paintball.bookings.errors import AddonNotFoundError, PackageNotFoundError
from paintball.db.models import Addon, Package
from paintball.engine import AddonLine, InputValidationError, Quote, assemble_quote


class AddonSelectionArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    addon_id: int = Field(alias="addonId")
    qty: int = Field(ge=1)


class QuoteArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    package_id: int = Field(alias="packageId")
    group_size: int = Field(alias="groupSize", ge=1)
    start_iso: str = Field(alias="startISO", min_length=1)
    addons: list[AddonSelectionArgs] = Field(default_factory=list)

    @field_validator("start_iso")
    @classmethod
    def validate_start_iso(cls, value: str) -> str:
        return ensure_iso_datetime(value)


def ensure_iso_datetime(value: str) -> str:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError("startISO must be a valid ISO date") from exc
    return value


def parse_quote_args(raw_args: dict[str, Any]) -> QuoteArgs:
    return QuoteArgs.model_validate(raw_args)


def map_validation_error(error: ValidationError | InputValidationError) -> dict[str, str]:
    if isinstance(error, ValidationError):
        message = error.errors()[0]["msg"]
    else:
        message = str(error)
    return {
        "error_code": "INVALID_ARGS",
        "human_message": f"Invalid args: {message}",
    }


def quote_booking(db: Session, args: QuoteArgs) -> Quote:
    package = find_package(db, package_id=args.package_id)
    if package is None:
        raise PackageNotFoundError("Package not found.")

    return quote_for_package(
        db=db,
        package=package,
        group_size=args.group_size,
        start=args.start_iso,
        addons=args.addons,
    )


def quote_for_package(
    db: Session,
    package: Package,
    group_size: int,
    start: str | datetime,
    addons: list[AddonSelectionArgs],
    duration_min: int | None = None,
) -> Quote:
    rules = pricing_rules_for(get_venue_settings(db))
    return assemble_quote(
        price_per_player_cents=package.price_cents,
        duration_min=duration_min or package.duration_min,
        group_size=group_size,
        start=start,
        addons=resolve_addon_lines(db, addons),
        rules=rules,
    )


def resolve_addon_lines(db: Session, selections: list[AddonSelectionArgs]) -> list[AddonLine]:
    if not selections:
        return []

    prices = {addon.id: addon.price_cents for addon in db.query(Addon).all()}
    missing = [s.addon_id for s in selections if s.addon_id not in prices]
    if missing:
        raise AddonNotFoundError("One or more addons not found.")

    return [AddonLine(price_cents=prices[s.addon_id], qty=s.qty) for s in selections]
