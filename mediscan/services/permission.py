# mediscan/services/permission.py
import logging

from mediscan.schemas.models import PermissionDecision, PermissionStatus
from mediscan.services.reminder_store import KeyValueStore, kv_store

logger = logging.getLogger(__name__)

PERMISSION_KEY = "notificationPermission"

class NotificationPermission:
    """Persisted notification permission: default until the user answers."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def status(self) -> PermissionStatus:
        value = self.kv.get(PERMISSION_KEY)
        return value if value in ("granted", "denied") else "default"

    def granted(self) -> bool:
        return self.status() == "granted"

    def record(self, decision: PermissionDecision) -> PermissionStatus:
        # dismissing the prompt leaves the question open
        if decision in ("granted", "denied"):
            self.kv.set(PERMISSION_KEY, decision)
        logger.info("Notification permission %s -> %s", decision, self.status())
        return self.status()

notification_permission = NotificationPermission(kv_store)
