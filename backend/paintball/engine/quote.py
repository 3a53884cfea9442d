from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Any

from paintball.engine.guards import ensure_count, to_venue_datetime
from paintball.engine.pricing import (
    AddonLine,
    compute_addons,
    compute_base,
    compute_deposit,
    compute_nocturne_extra,
    compute_total,
    compute_under_minimum_penalty,
)
from paintball.engine.rules import PricingRules
from paintball.engine.slots import is_nocturne


@dataclass(frozen=True)
class QuoteBreakdown:
    base: int
    addons: int
    nocturne_extra: int
    under_min_penalty: int

    def to_dict(self) -> dict[str, int]:
        return {
            "base": self.base,
            "addons": self.addons,
            "nocturneExtra": self.nocturne_extra,
            "underMinPenalty": self.under_min_penalty,
        }


@dataclass(frozen=True)
class Quote:
    total_cents: int
    nocturne: bool
    session_end: datetime
    breakdown: QuoteBreakdown
    deposit_cents: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCents": self.total_cents,
            "nocturne": self.nocturne,
            "endISO": self.session_end.isoformat(),
            "depositCents": self.deposit_cents,
            "breakdown": self.breakdown.to_dict(),
        }


def assemble_quote(
    *,
    price_per_player_cents: int | float,
    duration_min: int,
    group_size: int,
    start: str | datetime,
    addons: Sequence[AddonLine | Mapping[str, Any]] = (),
    rules: PricingRules | None = None,
    tz: tzinfo | None = None,
) -> Quote:
    rules = rules or PricingRules()
    local_start = to_venue_datetime(start, "start", tz=tz)
    minutes = ensure_count(duration_min, "duration_min")

    breakdown = QuoteBreakdown(
        base=compute_base(price_per_player_cents, group_size),
        addons=compute_addons(addons),
        nocturne_extra=compute_nocturne_extra(
            local_start,
            group_size,
            threshold_hour=rules.nocturne_threshold_hour,
            per_person_cents=rules.nocturne_per_person_cents,
            tz=tz,
        ),
        under_min_penalty=compute_under_minimum_penalty(
            group_size,
            min_players=rules.min_players,
            penalty_per_missing_cents=rules.penalty_per_missing_player_cents,
        ),
    )
    total_cents = compute_total(
        base=breakdown.base,
        addons=breakdown.addons,
        nocturne_extra=breakdown.nocturne_extra,
        under_min_penalty=breakdown.under_min_penalty,
    )

    return Quote(
        total_cents=total_cents,
        nocturne=is_nocturne(local_start, threshold_label(rules.nocturne_threshold_hour), tz=tz),
        session_end=local_start + timedelta(minutes=minutes),
        breakdown=breakdown,
        deposit_cents=compute_deposit(total_cents, rules.deposit),
    )


def threshold_label(threshold_hour: int) -> str:
    return f"{int(threshold_hour):02d}:00"
