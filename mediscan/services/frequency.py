# mediscan/services/frequency.py
from typing import List, Literal

Meal = Literal["Breakfast", "Lunch", "Dinner", "Bedtime"]

# Checked in this order: "1-1-1-1" also contains "1-1-1".
_COUNT_PATTERNS = (
    (4, ("four", "1-1-1-1", "qds")),
    (3, ("thrice", "three", "1-1-1", "tds")),
    (2, ("twice", "1-0-1", "0-1-1", "1-1-0", "bd")),
    (1, ("once", "1-0-0", "0-1-0", "0-0-1", "od")),
)

# Unrecognised frequency text means once daily.
DEFAULT_DOSE_COUNT = 1

def dose_count(frequency: str) -> int:
    f = (frequency or "").lower()
    for count, patterns in _COUNT_PATTERNS:
        if any(p in f for p in patterns):
            return count
    return DEFAULT_DOSE_COUNT

def default_gap_hours(frequency: str) -> float | None:
    """Even spacing across the day, e.g. twice a day -> 12h. None for once daily."""
    n = dose_count(frequency)
    return 24 / n if n > 1 else None

def slot_labels(frequency: str, timing: str) -> List[str]:
    """
    Ordered, human readable label per daily dose, e.g.
    ("1-0-1", "after food") -> ["After Breakfast", "After Dinner"].
    Always returns exactly dose_count(frequency) labels.
    """
    count = dose_count(frequency)
    timing = timing or ""
    t = timing.lower()
    f = (frequency or "").lower()

    after_food = "after" in t
    before_food = "before" in t
    at_bedtime = "bedtime" in t or "night" in t

    def label(meal: Meal) -> str:
        if meal == "Bedtime" or (count == 1 and at_bedtime):
            return "At Bedtime"
        if after_food:
            return f"After {meal}"
        if before_food:
            return f"Before {meal}"
        return f"{meal} Dose"

    if count == 1:
        if at_bedtime:
            return ["At Bedtime"]
        if "breakfast" in t:
            return [label("Breakfast")]
        if "lunch" in t:
            return [label("Lunch")]
        if "dinner" in t:
            return [label("Dinner")]
        # timing names no meal: keep the raw text visible
        return [f"Daily Dose ({timing})"]

    if count == 2:
        if "1-0-1" in f:
            return [label("Breakfast"), label("Dinner")]
        if "1-1-0" in f:
            return [label("Breakfast"), label("Lunch")]
        if "0-1-1" in f:
            return [label("Lunch"), label("Dinner")]
        return [label("Breakfast"), label("Dinner")]

    if count == 3:
        return [label("Breakfast"), label("Lunch"), label("Dinner")]

    if count == 4:
        return [label("Breakfast"), label("Lunch"), label("Dinner"), label("Bedtime")]

    return [f"Dose {i + 1} ({timing})" for i in range(count)]
