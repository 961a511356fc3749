from typing import Any, Dict, List, Optional, TypedDict

class ReminderSessionState(TypedDict, total=False):
    # identity (session_id doubles as LangGraph thread_id)
    session_id: str

    # inputs
    extracted_text: str
    disease: str
    medicines: List[Dict[str, Any]]  # list of Medicine dicts, owned by this session

    # last user action, from the SELECT_TIMES resume payload
    action: str                                 # add | save | close
    pending_medicine: Optional[Dict[str, Any]]  # NewMedicine dict for "add"
    pending_times: Dict[str, List[str]]         # medicine name -> slot times for "save"

    # outputs
    notice: Optional[Dict[str, str]]       # {kind, message} shown on the next SELECT_TIMES
    violation: Optional[Dict[str, Any]]    # GapViolation dict
    saved: List[str]                       # medicine names with persisted reminders
    closed: bool
    audit: List[Dict[str, Any]]
