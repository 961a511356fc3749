from typing import List

from fastapi import APIRouter

from mediscan.schemas.models import (
    PermissionRequest, PermissionResponse, ReminderNotification, SchedulerStatus,
)
from mediscan.services.notifier import in_app_channel
from mediscan.services.permission import notification_permission
from mediscan.services.scheduler import reminder_scheduler

router = APIRouter(prefix="/notifications", tags=["notifications"])

@router.get("", response_model=List[ReminderNotification])
def pending_notifications():
    """Foreground alerts fired since the last call."""
    return in_app_channel.drain()

@router.get("/permission", response_model=PermissionResponse)
def get_permission():
    return PermissionResponse(status=notification_permission.status())

@router.post("/permission", response_model=PermissionResponse)
def set_permission(req: PermissionRequest):
    return PermissionResponse(status=notification_permission.record(req.decision))

@router.get("/scheduler", response_model=SchedulerStatus)
def scheduler_status():
    return reminder_scheduler.status()

@router.post("/scheduler/start", response_model=SchedulerStatus)
async def start_scheduler():
    reminder_scheduler.start()
    return reminder_scheduler.status()

@router.post("/scheduler/stop", response_model=SchedulerStatus)
async def stop_scheduler():
    await reminder_scheduler.stop()
    return reminder_scheduler.status()

@router.post("/scheduler/tick", response_model=List[ReminderNotification])
def run_tick():
    return reminder_scheduler.tick()
