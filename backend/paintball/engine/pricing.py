"""Quote components in integer cents.

Every function validates its inputs eagerly and raises
:class:`~paintball.engine.errors.InputValidationError` naming the offending
field. Fractional amounts are rounded to the nearest cent before they are
multiplied, never after.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any

from paintball.engine.errors import InputValidationError
from paintball.engine.guards import (
    ensure_amount,
    ensure_count,
    ensure_finite_number,
    parse_instant,
    round_cents,
)
from paintball.engine.rules import DepositConfig, FixedDeposit, NoDeposit, PercentDeposit


DEFAULT_NOCTURNE_THRESHOLD_HOUR = 20
DEFAULT_NOCTURNE_PER_PERSON_CENTS = 400
DEFAULT_MIN_PLAYERS = 8
DEFAULT_PENALTY_PER_MISSING_CENTS = 2500


@dataclass(frozen=True)
class AddonLine:
    price_cents: int | float
    qty: int


def compute_base(price_per_player_cents: int | float, group_size: int) -> int:
    ensure_amount(price_per_player_cents, "price_per_player_cents")
    players = ensure_count(group_size, "group_size")
    return round_cents(price_per_player_cents) * players


def compute_nocturne_extra(
    start: str | datetime,
    group_size: int,
    threshold_hour: int | float = DEFAULT_NOCTURNE_THRESHOLD_HOUR,
    per_person_cents: int | float = DEFAULT_NOCTURNE_PER_PERSON_CENTS,
    tz: tzinfo | None = None,
) -> int:
    if not isinstance(start, datetime) and (not isinstance(start, str) or not start.strip()):
        raise InputValidationError("start", "must be a non-empty ISO date string")

    players = ensure_count(group_size, "group_size")
    ensure_finite_number(threshold_hour, "threshold_hour")
    if threshold_hour < 0 or threshold_hour > 23:
        raise InputValidationError("threshold_hour", "must be between 0 and 23")
    ensure_amount(per_person_cents, "per_person_cents")

    local_start = parse_instant(start, "start", tz=tz)
    if local_start.hour < threshold_hour:
        return 0
    return round_cents(per_person_cents) * players


def compute_under_minimum_penalty(
    group_size: int,
    min_players: int = DEFAULT_MIN_PLAYERS,
    penalty_per_missing_cents: int | float = DEFAULT_PENALTY_PER_MISSING_CENTS,
) -> int:
    players = ensure_count(group_size, "group_size")
    minimum = ensure_count(min_players, "min_players")
    ensure_amount(penalty_per_missing_cents, "penalty_per_missing_cents")

    if players >= minimum:
        return 0
    return round_cents(penalty_per_missing_cents) * (minimum - players)


def compute_addons(selections: Sequence[AddonLine | Mapping[str, Any]]) -> int:
    if isinstance(selections, (str, bytes, Mapping)) or not isinstance(selections, Sequence):
        raise InputValidationError("addons", "must be a list")

    total = 0
    for index, selection in enumerate(selections):
        if isinstance(selection, Mapping):
            price_cents = selection.get("price_cents")
            qty = selection.get("qty")
        elif isinstance(selection, AddonLine):
            price_cents = selection.price_cents
            qty = selection.qty
        else:
            raise InputValidationError(f"addons[{index}]", "must be an addon line")

        ensure_amount(price_cents, f"addons[{index}].price_cents")
        quantity = ensure_count(qty, f"addons[{index}].qty")
        total += round_cents(price_cents) * quantity
    return total


def compute_total(
    *,
    base: int | float = 0,
    addons: int | float = 0,
    nocturne_extra: int | float = 0,
    under_min_penalty: int | float = 0,
) -> int:
    components = {
        "base": base,
        "addons": addons,
        "nocturne_extra": nocturne_extra,
        "under_min_penalty": under_min_penalty,
    }
    total = 0
    for name, value in components.items():
        ensure_amount(value, name)
        total += round_cents(value)
    return total


def compute_deposit(total_cents: int | float, config: DepositConfig) -> int:
    ensure_amount(total_cents, "total_cents")

    if isinstance(config, NoDeposit):
        return 0

    if isinstance(config, FixedDeposit):
        ensure_amount(config.amount_cents, "amount_cents")
        return round_cents(config.amount_cents)

    if isinstance(config, PercentDeposit):
        ensure_amount(config.percent, "percent")
        if config.percent > 100:
            raise InputValidationError("percent", "cannot exceed 100")
        if not config.online_payment_enabled:
            return 0
        return round_cents(total_cents * config.percent / 100)

    raise InputValidationError("deposit", "must be NONE, FIXED or PERCENT")
