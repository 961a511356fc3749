import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mediscan.core.config import AUTO_START_SCHEDULER, LOG_FORMAT, LOG_LEVEL
from mediscan.api.routes_reminders import router as reminders_router
from mediscan.api.routes_notifications import router as notifications_router
from mediscan.services.scheduler import reminder_scheduler

logging.basicConfig(
    level=getattr(logging, str(LOG_LEVEL).upper(), logging.INFO),
    format=LOG_FORMAT,
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if AUTO_START_SCHEDULER:
        reminder_scheduler.start()
    try:
        yield
    finally:
        await reminder_scheduler.stop()

app = FastAPI(title="MediScan Reminders", version="1.0", lifespan=lifespan)

app.include_router(reminders_router)
app.include_router(notifications_router)

@app.get("/health")
def health():
    return {"ok": True, "scheduler_running": reminder_scheduler.running}
@app.get("/")
def root():
    return {"ok": True, "service": "MediScan Reminders"}
