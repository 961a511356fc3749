# mediscan/utils/time_conflict.py
from __future__ import annotations

from typing import Iterable, List, Optional

from mediscan.schemas.models import GapViolation, Medicine
from mediscan.utils.clock import MINUTES_PER_DAY, hhmm_to_minutes

def _fmt_hours(hours: float) -> str:
    return str(int(hours)) if float(hours).is_integer() else f"{hours:g}"

def gap_message(medicine_name: str, min_gap_hours: float) -> str:
    return (
        f"Doses for {medicine_name} are too close. "
        f"Please ensure at least a {_fmt_hours(min_gap_hours)}-hour gap."
    )

def find_gap_violation(
    medicine_name: str,
    times: Iterable[str],
    min_gap_hours: float,
) -> Optional[GapViolation]:
    """
    Checks the minimum gap between consecutive doses of one medicine.
      - blank slots are ignored; fewer than 2 times always pass
      - "HH:MM" sorts chronologically, so a plain sort orders the day
      - the last dose of today must also be far enough from the first dose
        of tomorrow (wrap-around gap)
    """
    picked: List[str] = sorted(t for t in times if t)
    if len(picked) < 2:
        return None

    min_gap = min_gap_hours * 60
    minutes = [hhmm_to_minutes(t) for t in picked]

    gaps = [b - a for a, b in zip(minutes, minutes[1:])]
    gaps.append(minutes[0] + MINUTES_PER_DAY - minutes[-1])

    if any(g < min_gap for g in gaps):
        return GapViolation(
            medicine_name=medicine_name,
            required_gap_hours=min_gap_hours,
            message=gap_message(medicine_name, min_gap_hours),
        )
    return None

def validate_schedule(medicines: Iterable[Medicine]) -> Optional[GapViolation]:
    """First violation across all medicines; one violation aborts the whole save."""
    for med in medicines:
        violation = find_gap_violation(med.name, med.reminder_times, med.min_gap_hours)
        if violation:
            return violation
    return None
