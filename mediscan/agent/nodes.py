# mediscan/agent/nodes.py
import logging
from typing import Any, Dict, List

from langgraph.types import interrupt

from mediscan.agent.state import ReminderSessionState
from mediscan.core.config import USE_LLM_ANALYSIS
from mediscan.schemas.models import Medicine, NewMedicine
from mediscan.services.extraction import simple_extract_meds
from mediscan.services.hf_client import HFLLMError
from mediscan.services.llm.analysis import llm_analyze_prescription
from mediscan.services.ollama_client import OllamaError
from mediscan.services.permission import notification_permission
from mediscan.services.planning import apply_times, persist_reminders, prepare_medicines
from mediscan.services.reminder_store import reminder_store
from mediscan.utils.time_conflict import validate_schedule

logger = logging.getLogger(__name__)

INVALID_DOCUMENT = (
    "The uploaded document does not appear to be a prescription. "
    "Please upload the correct document type."
)
PERMISSION_NEEDED = "Please enable notifications to receive reminders."
SAVED = "Reminders saved successfully!"

def _audit(state: ReminderSessionState, event: str, extra: Dict[str, Any] | None = None) -> Dict[str, Any]:
    audit = list(state.get("audit") or [])
    audit.append({"event": event, **(extra or {})})
    return {"audit": audit}

def _medicines(state: ReminderSessionState) -> List[Medicine]:
    return [Medicine(**m) for m in (state.get("medicines") or [])]

def _dump(meds: List[Medicine]) -> List[Dict[str, Any]]:
    return [m.model_dump() for m in meds]

def _notice(kind: str, message: str) -> Dict[str, str]:
    return {"kind": kind, "message": message}

def analyze_node(state: ReminderSessionState) -> Dict[str, Any]:
    if state.get("medicines"):
        return _audit(state, "analyze.skip", {"reason": "medicines already provided"})

    text = (state.get("extracted_text") or "").strip()
    if text and USE_LLM_ANALYSIS:
        try:
            analysis = llm_analyze_prescription(text)
        except (OllamaError, HFLLMError) as e:
            logger.warning("LLM analysis failed, using heuristic extraction: %s", e)
            meds = simple_extract_meds(text)
            return {"medicines": _dump(meds), **_audit(state, "analyze.fallback.done", {"count": len(meds), "error": str(e)})}

        if not analysis.is_document_valid:
            return {
                "medicines": [],
                "closed": True,
                "notice": _notice("error", INVALID_DOCUMENT),
                **_audit(state, "analyze.invalid_document"),
            }
        return {
            "medicines": _dump(analysis.medicines),
            "disease": analysis.disease,
            **_audit(state, "analyze.llm.done", {"count": len(analysis.medicines)}),
        }

    meds = simple_extract_meds(text)
    return {"medicines": _dump(meds), **_audit(state, "analyze.heuristic.done", {"count": len(meds)})}

def route_after_analyze(state: ReminderSessionState) -> str:
    return "end" if state.get("closed") else "hydrate"

def hydrate_node(state: ReminderSessionState) -> Dict[str, Any]:
    meds = prepare_medicines(_medicines(state), reminder_store)
    return {"medicines": _dump(meds), **_audit(state, "hydrate.done", {"count": len(meds)})}

def edit_node(state: ReminderSessionState) -> Dict[str, Any]:
    """
    Waits for the user's next action on the reminder view.
    Resume payload: {"action": "add", "medicine": {...}}
                  | {"action": "save", "reminder_times": {name: [...]}}
                  | {"action": "close"}
    """
    payload = {
        "type": "SELECT_TIMES",
        "session_id": state["session_id"],
        "medicines": state.get("medicines") or [],
        "notice": state.get("notice"),
    }

    resume = interrupt(payload)
    if not isinstance(resume, dict):
        resume = {}

    return {
        "action": str(resume.get("action") or ""),
        "pending_medicine": resume.get("medicine"),
        "pending_times": resume.get("reminder_times") or {},
        "notice": None,
        "violation": None,
        **_audit(state, "edit.resumed", {"action": resume.get("action")}),
    }

def route_after_edit(state: ReminderSessionState) -> str:
    return {
        "add": "add_medicine",
        "save": "validate",
        "close": "close",
    }.get(state.get("action") or "", "edit")

def add_medicine_node(state: ReminderSessionState) -> Dict[str, Any]:
    new = NewMedicine(**(state.get("pending_medicine") or {}))
    meds = _medicines(state)

    if any(m.name.lower() == new.name.lower() for m in meds):
        return {
            "notice": _notice("error", f"A medicine named {new.name} is already in this schedule."),
            **_audit(state, "add_medicine.duplicate", {"name": new.name}),
        }

    meds.append(Medicine(**new.model_dump()))
    return {"medicines": _dump(meds), "pending_medicine": None, **_audit(state, "add_medicine.done", {"name": new.name})}

def validate_node(state: ReminderSessionState) -> Dict[str, Any]:
    meds = apply_times(_medicines(state), state.get("pending_times") or {})
    out: Dict[str, Any] = {"medicines": _dump(meds)}

    violation = validate_schedule(meds)
    if violation:
        out["violation"] = violation.model_dump()
        out["notice"] = _notice("gap_violation", violation.message)
        out.update(_audit(state, "validate.gap_violation", {"name": violation.medicine_name}))
        return out

    out.update(_audit(state, "validate.ok"))
    return out

def route_after_validate(state: ReminderSessionState) -> str:
    return "edit" if state.get("violation") else "permission"

def permission_node(state: ReminderSessionState) -> Dict[str, Any]:
    if notification_permission.granted():
        return _audit(state, "permission.granted")

    resume = interrupt({
        "type": "PERMISSION_REQUIRED",
        "session_id": state["session_id"],
        "message": "Allow notifications to receive medication reminders.",
    })
    decision = resume.get("decision") if isinstance(resume, dict) else None
    if decision in ("granted", "denied", "dismissed"):
        notification_permission.record(decision)

    if notification_permission.granted():
        return _audit(state, "permission.granted", {"decision": decision})

    # terminal for this save; the user has to save again
    return {
        "notice": _notice("permission_denied", PERMISSION_NEEDED),
        **_audit(state, "permission.denied", {"decision": decision}),
    }

def route_after_permission(state: ReminderSessionState) -> str:
    notice = state.get("notice") or {}
    return "edit" if notice.get("kind") == "permission_denied" else "persist"

def persist_node(state: ReminderSessionState) -> Dict[str, Any]:
    saved = persist_reminders(_medicines(state), reminder_store)
    return {
        "saved": saved,
        "notice": _notice("saved", SAVED),
        **_audit(state, "persist.done", {"saved": saved}),
    }

def close_node(state: ReminderSessionState) -> Dict[str, Any]:
    return {"closed": True, "medicines": [], **_audit(state, "close.done")}
