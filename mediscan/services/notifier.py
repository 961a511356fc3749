"""
Reminder delivery: a background push channel when one is configured,
otherwise (or when the push fails) the in-app foreground feed.
"""

import logging
from collections import deque
from typing import Deque, List, Optional

import requests

from mediscan.core.config import (
    NOTIFICATION_TITLE,
    REMINDER_PUSH_TIMEOUT_S,
    REMINDER_PUSH_URL,
)
from mediscan.schemas.models import ReminderNotification

logger = logging.getLogger(__name__)


def build_notification(medicine_name: str, dosage: Optional[str], hhmm: str, date: str) -> ReminderNotification:
    if dosage:
        body = f"Time to take your {medicine_name} ({dosage})."
    else:
        body = f"Time to take your {medicine_name}!"
    return ReminderNotification(
        medicine_name=medicine_name,
        dosage=dosage,
        time=hhmm,
        date=date,
        title=NOTIFICATION_TITLE,
        body=body,
    )


class PushChannel:
    """Persistent background delivery (ntfy-style HTTP push)."""

    name = "push"

    def __init__(self, url: str = REMINDER_PUSH_URL, timeout_s: int = REMINDER_PUSH_TIMEOUT_S):
        self.url = url
        self.timeout_s = timeout_s

    def available(self) -> bool:
        return bool(self.url)

    def send(self, n: ReminderNotification) -> None:
        r = requests.post(
            self.url,
            data=n.body.encode("utf-8"),
            headers={
                "Title": n.title,
                # same tag for the same slot, so a device never stacks duplicates
                "Tags": f"{n.medicine_name}-{n.time}",
            },
            timeout=self.timeout_s,
        )
        r.raise_for_status()


class InAppChannel:
    """Immediate foreground alerts, drained by the client."""

    name = "in_app"

    def __init__(self, maxlen: int = 200):
        self._pending: Deque[ReminderNotification] = deque(maxlen=maxlen)

    def available(self) -> bool:
        return True

    def send(self, n: ReminderNotification) -> None:
        self._pending.append(n)

    def drain(self) -> List[ReminderNotification]:
        out = list(self._pending)
        self._pending.clear()
        return out


class Notifier:
    def __init__(self, push: PushChannel, in_app: InAppChannel):
        self.push = push
        self.in_app = in_app

    def fire(self, n: ReminderNotification) -> ReminderNotification:
        if self.push.available():
            try:
                self.push.send(n)
                n.channel = "push"
                logger.info("Pushed reminder for %s at %s", n.medicine_name, n.time)
                return n
            except requests.RequestException as e:
                logger.warning("Push failed for %s at %s, using in-app alert: %s", n.medicine_name, n.time, e)

        self.in_app.send(n)
        n.channel = "in_app"
        logger.info("Queued in-app reminder for %s at %s", n.medicine_name, n.time)
        return n


in_app_channel = InAppChannel()
notifier = Notifier(PushChannel(), in_app_channel)
