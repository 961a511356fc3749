import re
from typing import List

from mediscan.schemas.models import Medicine
from mediscan.services.frequency import default_gap_hours

# abbreviation / phrase -> standard frequency wording understood by the parser
FREQ_MAP = {
    "four times": "Four times a day", "qds": "Four times a day", "qid": "Four times a day", "4x": "Four times a day",
    "thrice": "Thrice a day", "three times": "Thrice a day", "tds": "Thrice a day", "tid": "Thrice a day", "3x": "Thrice a day",
    "twice": "Twice a day", "two times": "Twice a day", "bd": "Twice a day", "bid": "Twice a day", "2x": "Twice a day",
    "once": "Once a day", "od": "Once a day", "daily": "Once a day", "1x": "Once a day",
}

_CODE_RE = re.compile(r"\b([01]-[01]-[01](?:-[01])?)\b")
_FREQ_RE = re.compile(r"\b(" + "|".join(re.escape(k) for k in FREQ_MAP) + r")\b", re.I)
_MED_HINT_RE = re.compile(r"\b(tab|tabs|tablet|cap|caps|capsule|syp|syrup|mg|mcg|ml|od|bd|bid|tds|tid|qds|qid|daily)\b", re.I)
_STRENGTH_RE = re.compile(r"(\d+(?:\.\d+)?\s?(mg|mcg|g|ml|iu))", re.IGNORECASE)
_NAME_RE = re.compile(r"^(?:(?:tab|tabs|tablet|cap|caps|capsule|syp|syrup)\.?\s+)?([A-Za-z][A-Za-z0-9\- ]*?)(?=\s+\d|\s*$|\s+-|\s+(?:od|bd|bid|tds|tid|qds|qid|once|twice|thrice|three|four|daily|after|before|at|with)\b)", re.I)

def _timing(ln_low: str) -> str:
    if "bedtime" in ln_low or "at night" in ln_low or re.search(r"\bhs\b", ln_low):
        return "At bedtime"
    if "before food" in ln_low or "before meal" in ln_low or "empty stomach" in ln_low:
        return "Before food"
    if "after food" in ln_low or "after meal" in ln_low or "with food" in ln_low:
        return "After food"
    return ""

def simple_extract_meds(text: str) -> List[Medicine]:
    """
    Line-based fallback when the LLM is unavailable.
    Only extracts lines that look like a medication instruction, so normal
    sentences are not parsed as medicine names.
    """
    meds: List[Medicine] = []
    if not text:
        return meds

    seen = set()
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    for ln in lines:
        if not (_MED_HINT_RE.search(ln) or _STRENGTH_RE.search(ln) or _CODE_RE.search(ln)):
            continue

        name_match = _NAME_RE.match(ln)
        if not name_match:
            continue
        name = name_match.group(1).strip()
        if not name or name.lower() in seen:
            continue

        strength_match = _STRENGTH_RE.search(ln)
        dosage = strength_match.group(1) if strength_match else ""

        code_match = _CODE_RE.search(ln)
        freq_match = _FREQ_RE.search(ln)
        if code_match:
            frequency = code_match.group(1)
        elif freq_match:
            frequency = FREQ_MAP[freq_match.group(1).lower()]
        else:
            frequency = ""

        # no frequency and no strength: probably not a medicine line
        if not frequency and not dosage:
            continue

        seen.add(name.lower())
        meds.append(Medicine(
            name=name,
            dosage=dosage,
            frequency=frequency or "Once a day",
            timing=_timing(ln.lower()),
            time_gap_hours=default_gap_hours(frequency),
        ))

    return meds
