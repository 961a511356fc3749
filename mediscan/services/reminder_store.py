# mediscan/services/reminder_store.py
import json
import logging
import sqlite3
from threading import Lock
from typing import Iterable, List, Optional

from mediscan.db.db_config import get_sqlite_connection
from mediscan.utils.clock import is_valid_time

logger = logging.getLogger(__name__)

REMINDERS_PREFIX = "reminders_"
LAST_NOTIFIED_PREFIX = "lastNotified_"
DOSAGE_PREFIX = "dosage_"


class KeyValueStore:
    """Durable string key/value table (the `kv` table in the service database)."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn
        self._lock = Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            row = self._conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._conn.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )
            self._conn.commit()

    def delete(self, key: str) -> None:
        with self._lock:
            self._conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            self._conn.commit()

    def keys_with_prefix(self, prefix: str) -> List[str]:
        # substr() instead of LIKE: "_" is a LIKE wildcard
        with self._lock:
            rows = self._conn.execute(
                "SELECT key FROM kv WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            ).fetchall()
        return [r[0] for r in rows]

    def clear(self) -> None:
        with self._lock:
            self._conn.execute("DELETE FROM kv")
            self._conn.commit()


def reminders_key(medicine_name: str) -> str:
    return f"{REMINDERS_PREFIX}{medicine_name}"

def last_notified_key(medicine_name: str, hhmm: str) -> str:
    return f"{LAST_NOTIFIED_PREFIX}{medicine_name}_{hhmm}"

def dosage_key(medicine_name: str) -> str:
    return f"{DOSAGE_PREFIX}{medicine_name}"


class ReminderStore:
    """
    Reminder times and notification dedupe marks, keyed by medicine name.

    Layout:
      reminders_<name>             -> JSON array of "HH:MM"
      lastNotified_<name>_<HH:MM>  -> "YYYY-MM-DD"
      dosage_<name>                -> dosage text shown in the reminder
    """

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def save(self, medicine_name: str, times: Iterable[str], dosage: Optional[str] = None) -> None:
        picked = list(dict.fromkeys(t for t in times if t))
        if picked:
            self.kv.set(reminders_key(medicine_name), json.dumps(picked))
            if dosage:
                self.kv.set(dosage_key(medicine_name), dosage)
            else:
                self.kv.delete(dosage_key(medicine_name))
        else:
            self.kv.delete(reminders_key(medicine_name))
            self.kv.delete(dosage_key(medicine_name))

    def load(self, medicine_name: str) -> List[str]:
        raw = self.kv.get(reminders_key(medicine_name))
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed reminder record for %s", medicine_name)
            return []
        if not isinstance(data, list):
            logger.warning("Ignoring non-list reminder record for %s", medicine_name)
            return []
        return [t for t in data if is_valid_time(t)]

    def hydrate_times(self, medicine_name: str, slot_count: int) -> List[str]:
        """Stored times fitted to the slot count, blanks for unset slots."""
        times = self.load(medicine_name)[:slot_count]
        return times + [""] * (slot_count - len(times))

    def dosage(self, medicine_name: str) -> Optional[str]:
        return self.kv.get(dosage_key(medicine_name))

    def list_all_medicine_names(self) -> List[str]:
        return [k[len(REMINDERS_PREFIX):] for k in self.kv.keys_with_prefix(REMINDERS_PREFIX)]

    def get_last_notified(self, medicine_name: str, hhmm: str) -> Optional[str]:
        return self.kv.get(last_notified_key(medicine_name, hhmm))

    def mark_notified(self, medicine_name: str, hhmm: str, date: str) -> None:
        self.kv.set(last_notified_key(medicine_name, hhmm), date)

    def clear(self, medicine_name: str) -> None:
        self.save(medicine_name, [])
        prefix = f"{LAST_NOTIFIED_PREFIX}{medicine_name}_"
        for key in self.kv.keys_with_prefix(prefix):
            # "A" must not take the marks of "A_B" with it
            if is_valid_time(key[len(prefix):]):
                self.kv.delete(key)


kv_store = KeyValueStore(get_sqlite_connection())
reminder_store = ReminderStore(kv_store)
