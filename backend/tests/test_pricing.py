from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from paintball.engine import (
    AddonLine,
    FixedDeposit,
    InputValidationError,
    NoDeposit,
    PercentDeposit,
    compute_addons,
    compute_base,
    compute_deposit,
    compute_nocturne_extra,
    compute_total,
    compute_under_minimum_penalty,
)


PARIS = ZoneInfo("Europe/Paris")


def test_compute_base_multiplies_price_by_group_size():
    assert compute_base(2500, 10) == 25000


def test_compute_base_rounds_price_before_multiplying():
    assert compute_base(199.6, 3) == 600


def test_compute_base_rounds_half_cents_up():
    assert compute_base(100.5, 2) == 202


def test_compute_base_accepts_integral_float_group_size():
    assert compute_base(2000, 3.0) == 6000


def test_compute_base_rejects_negative_group_size():
    with pytest.raises(InputValidationError, match="group_size cannot be negative"):
        compute_base(2000, -1)


def test_compute_base_rejects_fractional_group_size():
    with pytest.raises(InputValidationError, match="group_size must be an integer"):
        compute_base(2000, 2.5)


@pytest.mark.parametrize("price", [float("nan"), float("inf"), "2000", True])
def test_compute_base_rejects_non_finite_price(price):
    with pytest.raises(InputValidationError) as exc_info:
        compute_base(price, 2)
    assert exc_info.value.field == "price_per_player_cents"


def test_compute_base_rejects_negative_price():
    with pytest.raises(InputValidationError, match="price_per_player_cents cannot be negative"):
        compute_base(-1, 2)


def test_nocturne_extra_after_threshold():
    assert compute_nocturne_extra("2024-01-01T21:00:00", 5) == 2000


def test_nocturne_extra_before_threshold_is_zero():
    assert compute_nocturne_extra("2024-01-01T19:00:00", 5) == 0


def test_nocturne_extra_threshold_hour_is_inclusive():
    assert compute_nocturne_extra("2024-01-01T20:00:00", 3) == 1200


def test_nocturne_extra_supports_custom_threshold_and_rate():
    assert compute_nocturne_extra("2024-01-01T18:30:00", 4, 18, 250) == 1000


def test_nocturne_extra_reads_hour_in_venue_timezone():
    # 19:30 UTC is 21:30 in Paris during summer time.
    start = datetime(2024, 6, 15, 19, 30, tzinfo=timezone.utc)
    assert compute_nocturne_extra(start, 2, tz=PARIS) == 800
    assert compute_nocturne_extra("2024-06-15T19:30:00Z", 2, tz=PARIS) == 800


def test_nocturne_extra_rejects_invalid_iso_string():
    with pytest.raises(InputValidationError, match="must be a valid ISO date string"):
        compute_nocturne_extra("invalid", 5)


def test_nocturne_extra_rejects_empty_start():
    with pytest.raises(InputValidationError, match="start must be a non-empty ISO date string"):
        compute_nocturne_extra("", 5)


@pytest.mark.parametrize("threshold", [-1, 24])
def test_nocturne_extra_rejects_out_of_range_threshold(threshold):
    with pytest.raises(InputValidationError, match="threshold_hour must be between 0 and 23"):
        compute_nocturne_extra("2024-01-01T21:00:00", 5, threshold)


def test_under_minimum_penalty_is_zero_when_minimum_met():
    assert compute_under_minimum_penalty(8) == 0
    assert compute_under_minimum_penalty(12) == 0


def test_under_minimum_penalty_charges_missing_players():
    assert compute_under_minimum_penalty(5) == 7500


def test_under_minimum_penalty_supports_custom_values():
    assert compute_under_minimum_penalty(2, 5, 1000) == 3000


def test_under_minimum_penalty_rejects_fractional_minimum():
    with pytest.raises(InputValidationError, match="min_players must be an integer"):
        compute_under_minimum_penalty(2, 4.5)


def test_compute_addons_totals_lines():
    selections = [{"price_cents": 500, "qty": 2}, {"price_cents": 1200, "qty": 1}]
    assert compute_addons(selections) == 2200


def test_compute_addons_accepts_addon_lines():
    assert compute_addons([AddonLine(price_cents=249.5, qty=2), AddonLine(400, 0)]) == 500


def test_compute_addons_empty_list_is_zero():
    assert compute_addons([]) == 0


def test_compute_addons_rejects_fractional_quantity_naming_index():
    with pytest.raises(InputValidationError) as exc_info:
        compute_addons([{"price_cents": 100, "qty": 1}, {"price_cents": 100, "qty": 1.5}])
    assert exc_info.value.field == "addons[1].qty"
    assert "must be an integer" in str(exc_info.value)


def test_compute_addons_rejects_missing_price():
    with pytest.raises(InputValidationError, match=r"addons\[0\].price_cents must be a finite number"):
        compute_addons([{"qty": 1}])


def test_compute_addons_rejects_non_list():
    with pytest.raises(InputValidationError, match="addons must be a list"):
        compute_addons({"price_cents": 100, "qty": 1})


def test_compute_total_sums_components():
    total = compute_total(base=20000, addons=3000, nocturne_extra=1500, under_min_penalty=2500)
    assert total == 27000


def test_compute_total_defaults_missing_components_to_zero():
    assert compute_total(base=1000) == 1000
    assert compute_total() == 0


def test_compute_total_rejects_negative_component():
    with pytest.raises(InputValidationError, match="addons cannot be negative"):
        compute_total(base=1000, addons=-1)


def test_compute_total_rounds_fractional_components_to_int():
    total = compute_total(base=100.5, addons=0.25)

    assert total == 101
    assert isinstance(total, int)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), "100", None, False])
def test_compute_total_rejects_non_numeric_component(value):
    with pytest.raises(InputValidationError, match="nocturne_extra must be a finite number"):
        compute_total(base=1000, nocturne_extra=value)


def test_compute_deposit_none_is_zero():
    assert compute_deposit(20000, NoDeposit()) == 0


def test_compute_deposit_fixed_ignores_total():
    assert compute_deposit(10000, FixedDeposit(amount_cents=500)) == 500
    assert compute_deposit(0, FixedDeposit(amount_cents=500)) == 500


def test_compute_deposit_percent_with_online_payment():
    config = PercentDeposit(percent=20, online_payment_enabled=True)
    assert compute_deposit(10000, config) == 2000


def test_compute_deposit_percent_without_online_payment_is_zero():
    assert compute_deposit(10000, PercentDeposit(percent=20)) == 0


def test_compute_deposit_percent_rounds_half_up():
    config = PercentDeposit(percent=25, online_payment_enabled=True)
    assert compute_deposit(1002, config) == 251


@pytest.mark.parametrize(("percent", "expected"), [(0, 0), (100, 12345)])
def test_compute_deposit_percent_bounds(percent, expected):
    config = PercentDeposit(percent=percent, online_payment_enabled=True)
    assert compute_deposit(12345, config) == expected


def test_compute_deposit_fixed_rounds_fractional_amount():
    assert compute_deposit(10000, FixedDeposit(amount_cents=499.5)) == 500


def test_compute_deposit_rejects_percent_over_100():
    config = PercentDeposit(percent=150, online_payment_enabled=True)
    with pytest.raises(InputValidationError, match="percent cannot exceed 100"):
        compute_deposit(10000, config)


def test_compute_deposit_rejects_negative_total():
    with pytest.raises(InputValidationError, match="total_cents cannot be negative"):
        compute_deposit(-5, NoDeposit())


def test_pricing_functions_are_deterministic():
    start = "2024-01-01T21:15:00"
    assert compute_nocturne_extra(start, 7) == compute_nocturne_extra(start, 7)
    assert compute_base(1999.5, 4) == compute_base(1999.5, 4)
    assert compute_under_minimum_penalty(3) == compute_under_minimum_penalty(3)
