from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from app.application.exceptions import AvailabilityPolicyError
from app.application.utils.availability_policy import AvailabilityPolicy
from app.domain.entities.day_availability import DayAvailability
from app.domain.entities.time_slot import TimeSlot, build_slot_id

OPENING_HOUR = 9
CLOSING_HOUR = 19
SLOT_MINUTES = 45
WINDOW_DAYS = 30

logger = logging.getLogger(__name__)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5  # Saturday=5, Sunday=6


def generate_time_slots(
    day: date,
    policy: AvailabilityPolicy,
    *,
    opening_hour: int = OPENING_HOUR,
    closing_hour: int = CLOSING_HOUR,
    slot_minutes: int = SLOT_MINUTES,
) -> list[TimeSlot]:
    """
    Slots for one day, stepping by `slot_minutes` from opening time.
    A slot is emitted only if it ends at or before closing time, so with the
    default hours the last start is 18:00. Weekends have no slots at all.
    """
    if slot_minutes <= 0:
        raise ValueError("slot_minutes must be positive")
    if isinstance(day, datetime):
        day = day.date()
    if is_weekend(day):
        return []

    slots: list[TimeSlot] = []
    opening = opening_hour * 60
    closing = closing_hour * 60
    start = opening
    while start + slot_minutes <= closing:
        time_str = f"{start // 60:02d}:{start % 60:02d}"
        slots.append(
            TimeSlot(
                id=build_slot_id(day, time_str),
                time=time_str,
                available=_apply_policy(policy, day, time_str),
            )
        )
        start += slot_minutes
    return slots


def generate_availability(
    today: date,
    policy: AvailabilityPolicy,
    window_days: int = WINDOW_DAYS,
    *,
    opening_hour: int = OPENING_HOUR,
    closing_hour: int = CLOSING_HOUR,
    slot_minutes: int = SLOT_MINUTES,
) -> list[DayAvailability]:
    """Calendar of `window_days` consecutive days starting at `today` (time of day dropped)."""
    if window_days < 0:
        raise ValueError("window_days must not be negative")
    start = today.date() if isinstance(today, datetime) else today

    days: list[DayAvailability] = []
    for offset in range(window_days):
        day = start + timedelta(days=offset)
        days.append(
            DayAvailability(
                date=day,
                available=not is_weekend(day),
                time_slots=tuple(
                    generate_time_slots(
                        day,
                        policy,
                        opening_hour=opening_hour,
                        closing_hour=closing_hour,
                        slot_minutes=slot_minutes,
                    )
                ),
            )
        )

    logger.info(
        "Availability generated",
        extra={"start": start.isoformat(), "days": window_days},
    )
    return days


def _apply_policy(policy: AvailabilityPolicy, day: date, time_str: str) -> bool:
    try:
        result = policy(day, time_str)
    except Exception as e:
        raise AvailabilityPolicyError(f"Availability policy failed for {day.isoformat()} {time_str}") from e
    if not isinstance(result, bool):
        raise AvailabilityPolicyError(
            f"Availability policy must return bool, got {type(result).__name__}"
        )
    return result
