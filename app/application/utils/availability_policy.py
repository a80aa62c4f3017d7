from __future__ import annotations

import random
from datetime import date
from typing import Callable

AvailabilityPolicy = Callable[[date, str], bool]


def random_policy(ratio: float = 0.7, seed: int | None = None) -> AvailabilityPolicy:
    """
    Demo policy: each slot is open with probability `ratio`.
    Pass a seed to get the same calendar on every run.
    """
    if not 0.0 <= ratio <= 1.0:
        raise ValueError(f"ratio must be between 0 and 1, got {ratio}")
    rng = random.Random(seed)

    def _policy(day: date, time: str) -> bool:
        return rng.random() < ratio

    return _policy


def always_available(day: date, time: str) -> bool:
    return True


def blocked_times_policy(blocked: set[str]) -> AvailabilityPolicy:
    """Open every slot except those whose id ("YYYY-MM-DD-HH:MM") is listed."""

    def _policy(day: date, time: str) -> bool:
        return f"{day.isoformat()}-{time}" not in blocked

    return _policy
