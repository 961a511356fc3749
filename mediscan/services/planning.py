from typing import Dict, Iterable, List

from mediscan.schemas.models import Medicine
from mediscan.services.frequency import dose_count, slot_labels
from mediscan.services.reminder_store import ReminderStore

def prepare_medicine(med: Medicine, store: ReminderStore) -> Medicine:
    """Slot labels plus stored reminder times (blank where unset), one per dose."""
    labels = slot_labels(med.frequency, med.timing)
    if len(med.reminder_times) == len(labels):
        times = list(med.reminder_times)
    else:
        times = store.hydrate_times(med.name, len(labels))
    return med.model_copy(update={"slot_labels": labels, "reminder_times": times})

def prepare_medicines(meds: Iterable[Medicine], store: ReminderStore) -> List[Medicine]:
    return [prepare_medicine(m, store) for m in meds]

def apply_times(meds: Iterable[Medicine], times_by_name: Dict[str, List[str]]) -> List[Medicine]:
    """User picks per slot; medicines without an entry keep their current times."""
    out: List[Medicine] = []
    for m in meds:
        picked = times_by_name.get(m.name)
        if picked is None:
            out.append(m)
            continue
        n = dose_count(m.frequency)
        fitted = list(picked[:n]) + [""] * (n - len(picked))
        out.append(m.model_copy(update={"reminder_times": fitted}))
    return out

def persist_reminders(meds: Iterable[Medicine], store: ReminderStore) -> List[str]:
    """Writes every medicine's picked times; returns names that now have reminders."""
    saved: List[str] = []
    for m in meds:
        store.save(m.name, m.reminder_times, dosage=m.dosage or None)
        if any(m.reminder_times):
            saved.append(m.name)
    return saved
