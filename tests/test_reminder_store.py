from mediscan.services.reminder_store import last_notified_key, reminders_key


def test_save_then_load_round_trip(store):
    store.save("Amoxicillin", ["08:00", "20:00"])
    assert store.load("Amoxicillin") == ["08:00", "20:00"]
    assert store.kv.get(reminders_key("Amoxicillin")) == '["08:00", "20:00"]'


def test_saving_nothing_removes_the_key(store):
    store.save("Amoxicillin", ["08:00", "20:00"])
    store.save("Amoxicillin", [])
    assert store.load("Amoxicillin") == []
    assert store.kv.get(reminders_key("Amoxicillin")) is None


def test_blank_slots_are_dropped(store):
    store.save("Paracetamol", ["", "14:00", ""])
    assert store.load("Paracetamol") == ["14:00"]

    store.save("Paracetamol", ["", ""])
    assert store.kv.get(reminders_key("Paracetamol")) is None


def test_save_is_idempotent(store):
    store.save("A", ["08:00"], dosage="500mg")
    store.save("A", ["08:00"], dosage="500mg")
    assert store.load("A") == ["08:00"]
    assert store.dosage("A") == "500mg"
    assert store.list_all_medicine_names() == ["A"]


def test_load_missing_is_empty(store):
    assert store.load("never saved") == []


def test_malformed_record_is_treated_as_absent(store):
    store.kv.set(reminders_key("Broken"), "{not json")
    assert store.load("Broken") == []

    store.kv.set(reminders_key("Wrong"), '{"08:00": true}')
    assert store.load("Wrong") == []

    store.kv.set(reminders_key("Mixed"), '["08:00", 5, "25:99", "21:00"]')
    assert store.load("Mixed") == ["08:00", "21:00"]


def test_list_all_medicine_names_only_sees_reminder_keys(store):
    store.save("Vit_D", ["09:00"])
    store.save("Amoxicillin", ["08:00", "20:00"])
    store.mark_notified("Amoxicillin", "08:00", "2026-10-18")
    store.kv.set("notificationPermission", "granted")

    assert sorted(store.list_all_medicine_names()) == ["Amoxicillin", "Vit_D"]


def test_hydrate_times_fits_slot_count(store):
    store.save("A", ["08:00", "14:00", "20:00"])
    assert store.hydrate_times("A", 2) == ["08:00", "14:00"]
    assert store.hydrate_times("A", 4) == ["08:00", "14:00", "20:00", ""]
    assert store.hydrate_times("unknown", 2) == ["", ""]


def test_dedupe_marks(store):
    assert store.get_last_notified("A", "08:00") is None
    store.mark_notified("A", "08:00", "2026-10-18")
    assert store.get_last_notified("A", "08:00") == "2026-10-18"
    assert store.kv.get(last_notified_key("A", "08:00")) == "2026-10-18"


def test_clear_removes_reminders_and_marks(store):
    store.save("A", ["08:00"], dosage="1 tab")
    store.mark_notified("A", "08:00", "2026-10-18")
    store.clear("A")

    assert store.load("A") == []
    assert store.dosage("A") is None
    assert store.get_last_notified("A", "08:00") is None


def test_clear_keeps_marks_of_names_sharing_a_prefix(store):
    store.save("A", ["08:00"])
    store.save("A_B", ["08:00"])
    store.mark_notified("A", "08:00", "2026-10-18")
    store.mark_notified("A_B", "08:00", "2026-10-18")

    store.clear("A")

    assert store.get_last_notified("A", "08:00") is None
    assert store.get_last_notified("A_B", "08:00") == "2026-10-18"
    assert store.load("A_B") == ["08:00"]
