# mediscan/services/llm/analysis_sanitize.py
from typing import Any, Dict, List, Optional

from mediscan.schemas.models import Medicine, PrescriptionAnalysis

def normalize_gap_hours(v: Any) -> Optional[float]:
    """Positive number of hours, else None (the service default applies)."""
    if isinstance(v, bool):
        return None
    try:
        hours = float(v)
    except (TypeError, ValueError):
        return None
    return hours if hours > 0 else None

def _text(v: Any) -> str:
    return str(v).strip() if v is not None else ""

def sanitize_medicines(raw_meds: Any) -> List[Medicine]:
    if not isinstance(raw_meds, list):
        return []

    out: List[Medicine] = []
    seen = set()
    for m in raw_meds:
        if not isinstance(m, dict):
            continue
        name = _text(m.get("name"))
        if not name:
            continue
        # name is the reminder key: a repeated name would share reminders
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)

        out.append(Medicine(
            name=name,
            dosage=_text(m.get("dosage")),
            frequency=_text(m.get("frequency")),
            timing=_text(m.get("timing")),
            reason=_text(m.get("reason")) or None,
            time_gap_hours=normalize_gap_hours(m.get("time_gap_hours")),
        ))
    return out

def sanitize_analysis(raw: Dict[str, Any]) -> PrescriptionAnalysis:
    valid = bool(raw.get("is_document_valid", False))
    if not valid:
        return PrescriptionAnalysis(is_document_valid=False, document_type="OTHER")

    return PrescriptionAnalysis(
        is_document_valid=True,
        document_type="PRESCRIPTION",
        disease=_text(raw.get("disease")),
        medicines=sanitize_medicines(raw.get("medicines")),
    )
