"""
Tests for calendar and time slot generation.
"""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta

import pytest

from app.application.exceptions import AvailabilityPolicyError
from app.application.use_cases.generate_availability import (
    generate_availability,
    generate_time_slots,
)
from app.application.utils.availability_policy import (
    always_available,
    blocked_times_policy,
    random_policy,
)

MONDAY = date(2024, 1, 1)
SATURDAY = date(2024, 1, 6)
SUNDAY = date(2024, 1, 7)

WEEKDAY_TIMES = [
    "09:00", "09:45", "10:30", "11:15", "12:00", "12:45", "13:30",
    "14:15", "15:00", "15:45", "16:30", "17:15", "18:00",
]


def test_weekday_slot_times_follow_45_minute_steps():
    """Weekday slots start at 09:00, step by 45 minutes and end with 18:00."""
    slots = generate_time_slots(MONDAY, always_available)

    assert [s.time for s in slots] == WEEKDAY_TIMES
    assert all(s.time < "19:00" for s in slots)
    assert all(s.available for s in slots)


def test_weekend_has_no_slots():
    assert generate_time_slots(SATURDAY, always_available) == []
    assert generate_time_slots(SUNDAY, always_available) == []


def test_slot_ids_combine_date_and_time():
    slots = generate_time_slots(MONDAY, always_available)

    assert slots[0].id == "2024-01-01-09:00"
    assert slots[-1].id == "2024-01-01-18:00"


def test_time_of_day_is_ignored_for_slots():
    slots = generate_time_slots(datetime(2024, 1, 1, 15, 30), always_available)

    assert slots[0].id == "2024-01-01-09:00"


def test_policy_decides_slot_availability():
    policy = blocked_times_policy({"2024-01-01-09:45", "2024-01-01-18:00"})
    slots = {s.time: s.available for s in generate_time_slots(MONDAY, policy)}

    assert slots["09:45"] is False
    assert slots["18:00"] is False
    assert slots["09:00"] is True


def test_window_has_consecutive_days_from_midnight():
    """30 entries, strictly increasing by one day, starting at today truncated to midnight."""
    days = generate_availability(datetime(2024, 1, 1, 16, 45), always_available, 30)

    assert len(days) == 30
    assert days[0].date == MONDAY
    for previous, current in zip(days, days[1:]):
        assert current.date - previous.date == timedelta(days=1)


def test_monday_window_first_weekend_is_closed():
    days = generate_availability(MONDAY, always_available, 30)

    saturday, sunday = days[5], days[6]
    assert saturday.date == SATURDAY and sunday.date == SUNDAY
    assert saturday.available is False and saturday.time_slots == ()
    assert sunday.available is False and sunday.time_slots == ()


def test_weekday_stays_available_when_every_slot_is_taken():
    days = generate_availability(MONDAY, lambda day, time: False, 5)

    for day in days:
        assert day.available is True
        assert day.time_slots
        assert day.open_slots == ()


def test_slot_ids_are_unique_across_window():
    days = generate_availability(MONDAY, always_available, 30)
    ids = [slot.id for day in days for slot in day.time_slots]

    assert len(ids) == len(set(ids))
    assert len(ids) == 22 * len(WEEKDAY_TIMES)  # Jan 1-30 2024 has 22 weekdays


def test_seeded_policy_is_reproducible():
    first = generate_availability(MONDAY, random_policy(seed=7), 14)
    second = generate_availability(MONDAY, random_policy(seed=7), 14)

    assert first == second


def test_random_policy_ratio_is_roughly_seventy_percent():
    policy = random_policy(seed=1234)
    draws = [policy(MONDAY, "09:00") for _ in range(5000)]

    assert 0.65 < sum(draws) / len(draws) < 0.75


def test_random_policy_rejects_invalid_ratio():
    with pytest.raises(ValueError):
        random_policy(ratio=1.5)


def test_policy_exception_is_wrapped():
    def broken(day, time):
        raise LookupError("no schedule")

    with pytest.raises(AvailabilityPolicyError) as exc_info:
        generate_availability(MONDAY, broken, 3)

    assert isinstance(exc_info.value.__cause__, LookupError)


def test_policy_must_return_bool():
    with pytest.raises(AvailabilityPolicyError):
        generate_time_slots(MONDAY, lambda day, time: random.random())


def test_negative_window_is_rejected():
    with pytest.raises(ValueError):
        generate_availability(MONDAY, always_available, -1)


def test_custom_working_hours():
    slots = generate_time_slots(MONDAY, always_available, opening_hour=10, closing_hour=12, slot_minutes=30)

    assert [s.time for s in slots] == ["10:00", "10:30", "11:00", "11:30"]
