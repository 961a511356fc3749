# mediscan/api/routes_reminders.py
import uuid
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException
from langgraph.types import Command

from mediscan.agent.graph import pending_interrupt, reminder_graph
from mediscan.schemas.models import (
    Medicine, NewMedicine, PermissionRequest, SaveRemindersRequest,
    SessionRequest, SessionResponse, SlotsResponse, TimeOption,
)
from mediscan.services.frequency import dose_count, slot_labels
from mediscan.services.reminder_store import reminder_store
from mediscan.services.time_options import filtered_options

router = APIRouter(prefix="/reminders", tags=["reminders"])

def _config(session_id: str):
    return {"configurable": {"thread_id": session_id}}

def _snapshot(session_id: str):
    snap = reminder_graph.get_state(_config(session_id))
    if not snap.values:
        raise HTTPException(status_code=404, detail="session_id not found")
    return snap

def _session_response(session_id: str) -> SessionResponse:
    snap = _snapshot(session_id)
    state = snap.values
    pending = pending_interrupt(snap)

    status = pending.get("type") if pending else "CLOSED"
    if status not in ("SELECT_TIMES", "PERMISSION_REQUIRED"):
        status = "CLOSED"

    return SessionResponse(
        session_id=session_id,
        status=status,
        disease=state.get("disease") or "",
        medicines=[Medicine(**m) for m in (state.get("medicines") or [])],
        notice=state.get("notice"),
        violation=state.get("violation"),
    )

def _resume(session_id: str, expected: str, payload: Dict[str, Any]) -> SessionResponse:
    snap = _snapshot(session_id)
    pending = pending_interrupt(snap)
    itype = pending.get("type") if pending else None
    if itype != expected:
        raise HTTPException(
            status_code=409,
            detail=f"Session not waiting for {expected}. interrupt_type={itype}",
        )
    reminder_graph.invoke(Command(resume=payload), config=_config(session_id))
    return _session_response(session_id)

@router.post("/sessions", response_model=SessionResponse)
def start_session(req: SessionRequest):
    session_id = "session_" + uuid.uuid4().hex

    initial_state = {
        "session_id": session_id,
        "extracted_text": req.extracted_text or "",
        "medicines": [m.model_dump() for m in (req.medicines or [])],
        "audit": [],
    }
    reminder_graph.invoke(initial_state, config=_config(session_id))
    return _session_response(session_id)

@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str):
    return _session_response(session_id)

@router.post("/sessions/{session_id}/medicines", response_model=SessionResponse)
def add_medicine(session_id: str, req: NewMedicine):
    return _resume(session_id, "SELECT_TIMES", {"action": "add", "medicine": req.model_dump()})

@router.post("/sessions/{session_id}/save", response_model=SessionResponse)
def save_reminders(session_id: str, req: SaveRemindersRequest):
    names = {m.get("name") for m in (_snapshot(session_id).values.get("medicines") or [])}
    unknown = sorted(set(req.reminder_times) - names)
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown medicines in this session: {', '.join(unknown)}")
    return _resume(session_id, "SELECT_TIMES", {"action": "save", "reminder_times": req.reminder_times})

@router.post("/sessions/{session_id}/permission", response_model=SessionResponse)
def answer_permission(session_id: str, req: PermissionRequest):
    return _resume(session_id, "PERMISSION_REQUIRED", {"decision": req.decision})

@router.delete("/sessions/{session_id}", response_model=SessionResponse)
def close_session(session_id: str):
    return _resume(session_id, "SELECT_TIMES", {"action": "close"})

@router.get("/sessions/{session_id}/audit")
def session_audit(session_id: str):
    return {"session_id": session_id, "audit": _snapshot(session_id).values.get("audit", [])}

@router.get("/time-options", response_model=List[TimeOption])
def time_options(label: str = ""):
    return filtered_options(label)

@router.get("/slots", response_model=SlotsResponse)
def slots(frequency: str = "", timing: str = ""):
    return SlotsResponse(
        frequency=frequency,
        timing=timing,
        dose_count=dose_count(frequency),
        slot_labels=slot_labels(frequency, timing),
    )

@router.get("/stored")
def stored_reminders() -> Dict[str, List[str]]:
    return {name: reminder_store.load(name) for name in reminder_store.list_all_medicine_names()}

@router.delete("/stored/{medicine_name}")
def clear_stored_reminders(medicine_name: str):
    reminder_store.clear(medicine_name)
    return {"ok": True, "medicine_name": medicine_name}
