from conftest import add_settings

from paintball.admin.settings import (
    DEFAULT_OPENING_HOURS,
    deposit_config_for,
    normalize_opening_hours,
    pricing_rules_for,
)
from paintball.db.models import VenueSettings
from paintball.engine import FixedDeposit, NoDeposit, PercentDeposit


def _settings_payload(**overrides):
    payload = {
        "nocturneThreshold": 21,
        "nocturnePerPersonCents": 500,
        "minPlayers": 6,
        "penaltyUnderMinCents": 2000,
        "openingHours": {
            day: dict(schedule) for day, schedule in DEFAULT_OPENING_HOURS.items()
        },
        "stripeEnabled": False,
        "depositType": "NONE",
    }
    payload.update(overrides)
    return payload


def test_get_settings_creates_defaults(client, fake_session):
    response = client.get("/v1/admin/settings")

    body = response.json()
    assert response.status_code == 200
    settings = body["data"]["settings"]
    assert settings["id"] == "global"
    assert settings["nocturneThreshold"] == 20
    assert settings["minPlayers"] == 8
    assert settings["penaltyUnderMinCents"] == 2500
    assert settings["depositType"] == "NONE"
    assert settings["openingHours"]["sunday"]["closed"] is True
    assert len(fake_session.store[VenueSettings]) == 1


def test_put_settings_updates_row(client, fake_session):
    response = client.put(
        "/v1/admin/settings",
        json=_settings_payload(stripeEnabled=True, depositType="PERCENT", depositPercent=25),
    )

    body = response.json()
    assert response.status_code == 200
    settings = body["data"]["settings"]
    assert settings["nocturneThreshold"] == 21
    assert settings["depositType"] == "PERCENT"
    assert settings["depositPercent"] == 25
    assert settings["depositFixedCents"] is None

    row = fake_session.store[VenueSettings][0]
    assert pricing_rules_for(row).deposit == PercentDeposit(percent=25, online_payment_enabled=True)


def test_put_settings_percent_deposit_requires_online_payment(client, fake_session):
    response = client.put(
        "/v1/admin/settings",
        json=_settings_payload(depositType="PERCENT", depositPercent=25),
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_ARGS"


def test_put_settings_fixed_deposit_requires_amount(client, fake_session):
    response = client.put("/v1/admin/settings", json=_settings_payload(depositType="FIXED"))

    assert response.status_code == 400


def test_put_settings_rejects_close_before_open(client, fake_session):
    payload = _settings_payload()
    payload["openingHours"]["monday"] = {"open": "18:00", "close": "09:00", "closed": False}

    response = client.put("/v1/admin/settings", json=payload)

    assert response.status_code == 400


def test_put_settings_rejects_out_of_range_threshold(client, fake_session):
    response = client.put("/v1/admin/settings", json=_settings_payload(nocturneThreshold=24))

    assert response.status_code == 400


def test_normalize_opening_hours_fills_missing_days_and_bad_times():
    hours = normalize_opening_hours(
        {"monday": {"open": "8h", "close": "20:00", "closed": "no"}, "friday": "closed"}
    )

    assert list(hours) == list(DEFAULT_OPENING_HOURS)
    assert hours["monday"] == {"open": "09:00", "close": "20:00", "closed": False}
    assert hours["friday"] == DEFAULT_OPENING_HOURS["friday"]


def test_normalize_opening_hours_handles_non_dict():
    assert normalize_opening_hours(None) == DEFAULT_OPENING_HOURS
    assert normalize_opening_hours(["monday"]) == DEFAULT_OPENING_HOURS


def test_deposit_config_clamps_stored_values(fake_session):
    fixed = add_settings(fake_session, deposit_type="FIXED", deposit_fixed_cents=-300)
    assert deposit_config_for(fixed) == FixedDeposit(amount_cents=0)

    fixed.deposit_type = "PERCENT"
    fixed.deposit_percent = 180
    fixed.stripe_enabled = True
    assert deposit_config_for(fixed) == PercentDeposit(percent=100, online_payment_enabled=True)

    fixed.deposit_type = "SOMETHING"
    assert deposit_config_for(fixed) == NoDeposit()


def test_pricing_rules_reflect_stored_settings(fake_session):
    settings = add_settings(
        fake_session,
        nocturne_threshold=19,
        nocturne_per_person_cents=300,
        min_players=10,
        penalty_under_min_cents=1500,
    )

    rules = pricing_rules_for(settings)

    assert rules.nocturne_threshold_hour == 19
    assert rules.nocturne_per_person_cents == 300
    assert rules.min_players == 10
    assert rules.penalty_per_missing_player_cents == 1500
    assert rules.deposit == NoDeposit()
