"""Read-only pricing rules derived from the venue settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class NoDeposit:
    pass


@dataclass(frozen=True)
class FixedDeposit:
    amount_cents: int | float


@dataclass(frozen=True)
class PercentDeposit:
    percent: int | float
    # A percentage deposit is only collected when online payment is on.
    online_payment_enabled: bool = False


DepositConfig = Union[NoDeposit, FixedDeposit, PercentDeposit]


@dataclass(frozen=True)
class PricingRules:
    nocturne_threshold_hour: int = 20
    min_players: int = 8
    penalty_per_missing_player_cents: int = 2500
    nocturne_per_person_cents: int = 400
    deposit: DepositConfig = field(default_factory=NoDeposit)
