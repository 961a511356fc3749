from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from mediscan.core.config import DEFAULT_TIME_GAP_HOURS
from mediscan.utils.clock import is_valid_time

PermissionStatus = Literal["default", "granted", "denied"]
PermissionDecision = Literal["granted", "denied", "dismissed"]
SessionStatus = Literal["SELECT_TIMES", "PERMISSION_REQUIRED", "CLOSED"]
NoticeKind = Literal["saved", "gap_violation", "permission_denied", "error"]
Channel = Literal["push", "in_app"]

class Medicine(BaseModel):
    name: str
    dosage: str = ""
    frequency: str = ""
    timing: str = ""
    reason: Optional[str] = None
    time_gap_hours: Optional[float] = Field(
        default=None,
        description="Minimum hours between doses. Null means the service default.",
    )

    # session-only view state
    reminder_times: List[str] = Field(default_factory=list)  # "HH:MM" or "" per slot
    slot_labels: List[str] = Field(default_factory=list)

    @field_validator("reminder_times")
    @classmethod
    def _slot_times(cls, v: List[str]) -> List[str]:
        for t in v:
            if t and not is_valid_time(t):
                raise ValueError(f"Invalid time {t!r}; expected HH:MM.")
        return v

    @property
    def min_gap_hours(self) -> float:
        if self.time_gap_hours and self.time_gap_hours > 0:
            return self.time_gap_hours
        return DEFAULT_TIME_GAP_HOURS

class NewMedicine(BaseModel):
    name: str
    dosage: str
    frequency: str
    timing: str
    reason: Optional[str] = None

    @field_validator("name", "dosage", "frequency", "timing")
    @classmethod
    def _required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Please fill in all required fields for the new medicine.")
        return v

class TimeOption(BaseModel):
    label: str  # "h:mm AM/PM"
    value: str  # "HH:MM"

class GapViolation(BaseModel):
    medicine_name: str
    required_gap_hours: float
    message: str

class Notice(BaseModel):
    kind: NoticeKind
    message: str

class PrescriptionAnalysis(BaseModel):
    is_document_valid: bool = True
    document_type: Literal["PRESCRIPTION", "OTHER"] = "PRESCRIPTION"
    disease: str = ""
    medicines: List[Medicine] = Field(default_factory=list)

class ReminderNotification(BaseModel):
    medicine_name: str
    dosage: Optional[str] = None
    time: str
    date: str  # YYYY-MM-DD
    title: str
    body: str
    channel: Channel = "in_app"

class SessionRequest(BaseModel):
    extracted_text: Optional[str] = None  # OCR / document text
    medicines: Optional[List[Medicine]] = None  # structured result (preferred)

class SaveRemindersRequest(BaseModel):
    reminder_times: Dict[str, List[str]] = Field(default_factory=dict)  # name -> slot times

    @field_validator("reminder_times")
    @classmethod
    def _times(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        for name, times in v.items():
            for t in times:
                if t and not is_valid_time(t):
                    raise ValueError(f"Invalid time {t!r} for {name}; expected HH:MM.")
        return v

class PermissionRequest(BaseModel):
    decision: PermissionDecision

class PermissionResponse(BaseModel):
    status: PermissionStatus

class SessionResponse(BaseModel):
    session_id: str
    status: SessionStatus
    disease: str = ""
    medicines: List[Medicine] = Field(default_factory=list)
    notice: Optional[Notice] = None
    violation: Optional[GapViolation] = None

class SlotsResponse(BaseModel):
    frequency: str
    timing: str
    dose_count: int
    slot_labels: List[str]

class SchedulerStatus(BaseModel):
    running: bool
    tick_seconds: int
    last_tick: Optional[str] = None
    fired_total: int = 0
