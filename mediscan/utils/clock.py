# mediscan/utils/clock.py
import re
from datetime import datetime

_TIME_RE = re.compile(r"^\d{2}:\d{2}$")

MINUTES_PER_DAY = 24 * 60

def is_valid_time(hhmm: str) -> bool:
    if not isinstance(hhmm, str) or not _TIME_RE.match(hhmm):
        return False
    h, m = map(int, hhmm.split(":"))
    return 0 <= h <= 23 and 0 <= m <= 59

def hhmm_to_minutes(hhmm: str) -> int:
    h, m = map(int, hhmm.split(":"))
    return h * 60 + m

def clock_time(now: datetime) -> str:
    """Wall-clock "HH:MM" of `now`, minute precision."""
    return f"{now.hour:02d}:{now.minute:02d}"

def calendar_date(now: datetime) -> str:
    return now.date().isoformat()
