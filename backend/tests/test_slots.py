from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from paintball.engine import InputValidationError, generate_slots, is_nocturne


PARIS = ZoneInfo("Europe/Paris")
DAY = date(2024, 6, 15)


def _times(slots):
    return [slot.strftime("%H:%M") for slot in slots]


def test_generate_slots_fit_within_opening_window():
    slots = generate_slots(duration_min=60, open="09:00", close="12:00", step_min=60, on=DAY, tz=PARIS)

    assert _times(slots) == ["09:00", "10:00", "11:00"]


def test_generate_slots_stop_when_end_would_exceed_close():
    slots = generate_slots(duration_min=45, open="10:00", close="11:30", step_min=15, on=DAY, tz=PARIS)

    assert _times(slots) == ["10:00", "10:15", "10:30", "10:45"]


def test_generate_slots_are_anchored_to_requested_day_and_zone():
    slots = generate_slots(duration_min=120, open="09:00", close="22:00", step_min=30, on=DAY, tz=PARIS)

    assert slots[0] == datetime(2024, 6, 15, 9, 0, tzinfo=PARIS)
    assert slots[-1] == datetime(2024, 6, 15, 20, 0, tzinfo=PARIS)
    assert all(slot.date() == DAY for slot in slots)
    assert slots == sorted(slots)


def test_generate_slots_defaults_to_today_in_venue_zone():
    slots = generate_slots(duration_min=60, open="09:00", close="10:00", tz=PARIS)

    assert len(slots) == 1
    assert slots[0].date() == datetime.now(PARIS).date()


def test_generate_slots_empty_when_open_not_before_close():
    assert generate_slots(duration_min=30, open="12:00", close="12:00", on=DAY, tz=PARIS) == []
    assert generate_slots(duration_min=30, open="18:00", close="09:00", on=DAY, tz=PARIS) == []


def test_generate_slots_empty_when_duration_exceeds_window():
    assert generate_slots(duration_min=240, open="09:00", close="12:00", on=DAY, tz=PARIS) == []


@pytest.mark.parametrize("duration", [0, -30, float("nan"), "60"])
def test_generate_slots_rejects_non_positive_duration(duration):
    with pytest.raises(InputValidationError, match="duration_min must be a positive number"):
        generate_slots(duration_min=duration, on=DAY, tz=PARIS)


def test_generate_slots_rejects_non_positive_step():
    with pytest.raises(InputValidationError, match="step_min must be a positive number"):
        generate_slots(duration_min=60, step_min=0, on=DAY, tz=PARIS)


@pytest.mark.parametrize(
    ("value", "reason"),
    [
        ("9h", "open must be in HH:MM format"),
        ("24:00", "open hour must be between 0 and 23"),
        ("10:60", "open minutes must be between 0 and 59"),
        ("", "open must be a non-empty string"),
    ],
)
def test_generate_slots_rejects_malformed_open(value, reason):
    with pytest.raises(InputValidationError, match=reason):
        generate_slots(duration_min=60, open=value, on=DAY, tz=PARIS)


def test_is_nocturne_after_threshold():
    assert is_nocturne("2024-06-15T20:30:00.000Z", "20:00", tz=timezone.utc) is True


def test_is_nocturne_before_threshold():
    assert is_nocturne("2024-06-15T18:45:00.000Z", "20:00", tz=timezone.utc) is False


def test_is_nocturne_boundary_is_inclusive():
    assert is_nocturne("2024-06-15T20:00:00", "20:00") is True
    assert is_nocturne("2024-06-15T19:59:00", "20:00") is False


def test_is_nocturne_uses_venue_wall_clock():
    # 18:45 UTC is 20:45 in Paris.
    assert is_nocturne("2024-06-15T18:45:00Z", "20:00", tz=PARIS) is True


def test_is_nocturne_accepts_datetime():
    assert is_nocturne(datetime(2024, 6, 15, 21, 0, tzinfo=PARIS), "20:00", tz=PARIS) is True


def test_is_nocturne_rejects_invalid_inputs():
    with pytest.raises(InputValidationError, match="start must be a non-empty ISO string"):
        is_nocturne("", "20:00")
    with pytest.raises(InputValidationError, match="threshold must be in HH:MM format"):
        is_nocturne("2024-06-15T21:00:00", "8pm")
