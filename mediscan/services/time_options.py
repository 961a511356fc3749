# mediscan/services/time_options.py
from functools import lru_cache
from typing import List, Tuple

from mediscan.schemas.models import TimeOption

STEP_MINUTES = 15

# (label keywords, lowest hour, highest hour exclusive); first match wins
_SLOT_WINDOWS: Tuple[Tuple[Tuple[str, ...], int, int], ...] = (
    (("breakfast", "morning"), 0, 12),
    (("lunch", "afternoon"), 12, 17),
    (("dinner", "evening", "night"), 17, 24),
    (("bedtime",), 20, 24),
)

def _option(hour: int, minute: int) -> TimeOption:
    h12 = 12 if hour % 12 == 0 else hour % 12
    ampm = "PM" if hour >= 12 else "AM"
    return TimeOption(label=f"{h12}:{minute:02d} {ampm}", value=f"{hour:02d}:{minute:02d}")

@lru_cache(maxsize=1)
def _catalog() -> Tuple[TimeOption, ...]:
    return tuple(
        _option(hour, minute)
        for hour in range(24)
        for minute in range(0, 60, STEP_MINUTES)
    )

def all_options() -> List[TimeOption]:
    """Every quarter hour of the day, 00:00 .. 23:45."""
    return list(_catalog())

def filtered_options(label: str) -> List[TimeOption]:
    """
    Options that make sense for a slot label. Advisory only: callers may
    still accept any valid HH:MM value.
    """
    lbl = (label or "").lower()
    for keywords, lo, hi in _SLOT_WINDOWS:
        if any(k in lbl for k in keywords):
            return [o for o in _catalog() if lo <= int(o.value[:2]) < hi]
    return all_options()

def format_12h(value: str) -> str:
    if not value:
        return ""
    return next((o.label for o in _catalog() if o.value == value), "")
