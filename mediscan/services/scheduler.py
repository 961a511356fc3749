# mediscan/services/scheduler.py
import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from mediscan.core.config import REMINDER_TICK_SECONDS
from mediscan.schemas.models import ReminderNotification, SchedulerStatus
from mediscan.services.notifier import Notifier, build_notification, notifier
from mediscan.services.permission import NotificationPermission, notification_permission
from mediscan.services.reminder_store import ReminderStore, reminder_store
from mediscan.utils.clock import calendar_date, clock_time

logger = logging.getLogger(__name__)


class SlotState(str, Enum):
    IDLE = "IDLE"
    ARMED = "ARMED"
    FIRED = "FIRED"


class ReminderScheduler:
    """
    Once a minute, compares the wall clock to every stored reminder slot and
    fires at most one notification per slot per calendar date.

    Best effort: a minute that passes without a tick (sleeping host,
    stopped loop) is missed for that day, there is no catch-up.
    """

    def __init__(
        self,
        store: ReminderStore,
        permission: NotificationPermission,
        notifier: Notifier,
        tick_seconds: int = REMINDER_TICK_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.permission = permission
        self.notifier = notifier
        self.tick_seconds = tick_seconds
        self.clock = clock
        self.last_tick: Optional[datetime] = None
        self.fired_total = 0
        self._task: Optional[asyncio.Task] = None

    def slot_state(self, medicine_name: str, hhmm: str, now: datetime) -> SlotState:
        if self.store.get_last_notified(medicine_name, hhmm) == calendar_date(now):
            return SlotState.FIRED
        if hhmm == clock_time(now):
            return SlotState.ARMED
        return SlotState.IDLE

    def tick(self, now: Optional[datetime] = None) -> List[ReminderNotification]:
        now = now or self.clock()
        self.last_tick = now

        if not self.permission.granted():
            # no queueing: slots passed while ungranted are never replayed
            return []

        fired: List[ReminderNotification] = []
        for name in self.store.list_all_medicine_names():
            try:
                fired.extend(self._check_medicine(name, now))
            except Exception:
                logger.exception("Reminder check failed for %s; continuing", name)
        return fired

    def _check_medicine(self, medicine_name: str, now: datetime) -> List[ReminderNotification]:
        today = calendar_date(now)
        fired: List[ReminderNotification] = []
        for hhmm in self.store.load(medicine_name):
            if self.slot_state(medicine_name, hhmm, now) != SlotState.ARMED:
                continue
            n = build_notification(medicine_name, self.store.dosage(medicine_name), hhmm, today)
            self.notifier.fire(n)
            # mark only after a successful fire
            self.store.mark_notified(medicine_name, hhmm, today)
            self.fired_total += 1
            fired.append(n)
        return fired

    # ---------------------------
    # start / stop handle
    # ---------------------------
    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _safe_tick(self) -> None:
        # sqlite and the push request block, keep them off the event loop
        try:
            await asyncio.to_thread(self.tick)
        except Exception:
            logger.exception("Reminder tick failed; retrying next tick")

    async def _run(self) -> None:
        await self._safe_tick()
        while True:
            await asyncio.sleep(self.tick_seconds)
            await self._safe_tick()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Reminder scheduler started (every %ss)", self.tick_seconds)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Reminder scheduler stopped")

    def status(self) -> SchedulerStatus:
        return SchedulerStatus(
            running=self.running,
            tick_seconds=self.tick_seconds,
            last_tick=self.last_tick.isoformat(timespec="seconds") if self.last_tick else None,
            fired_total=self.fired_total,
        )


reminder_scheduler = ReminderScheduler(reminder_store, notification_permission, notifier)
