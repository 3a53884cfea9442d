from paintball.engine.errors import InputValidationError
from paintball.engine.pricing import (
    AddonLine,
    compute_addons,
    compute_base,
    compute_deposit,
    compute_nocturne_extra,
    compute_total,
    compute_under_minimum_penalty,
)
from paintball.engine.quote import Quote, QuoteBreakdown, assemble_quote
from paintball.engine.rules import (
    DepositConfig,
    FixedDeposit,
    NoDeposit,
    PercentDeposit,
    PricingRules,
)
from paintball.engine.slots import OpeningWindow, generate_slots, is_nocturne

__all__ = [
    "InputValidationError",
    "AddonLine",
    "compute_addons",
    "compute_base",
    "compute_deposit",
    "compute_nocturne_extra",
    "compute_total",
    "compute_under_minimum_penalty",
    "Quote",
    "QuoteBreakdown",
    "assemble_quote",
    "DepositConfig",
    "FixedDeposit",
    "NoDeposit",
    "PercentDeposit",
    "PricingRules",
    "OpeningWindow",
    "generate_slots",
    "is_nocturne",
]
