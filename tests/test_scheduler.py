import asyncio
import time
from datetime import datetime

import pytest
import requests

from mediscan.services.notifier import InAppChannel, Notifier, PushChannel
from mediscan.services.scheduler import ReminderScheduler, SlotState


class FailingPush(PushChannel):
    def __init__(self):
        super().__init__(url="http://push.invalid/topic")
        self.calls = 0

    def send(self, n):
        self.calls += 1
        raise requests.ConnectionError("offline")


class RecordingPush(PushChannel):
    def __init__(self):
        super().__init__(url="http://push.invalid/topic")
        self.sent = []

    def send(self, n):
        self.sent.append(n)


@pytest.fixture
def in_app():
    return InAppChannel()


@pytest.fixture
def scheduler(store, permission, in_app):
    return ReminderScheduler(store, permission, Notifier(PushChannel(url=""), in_app), tick_seconds=60)


D = datetime(2026, 10, 18, 8, 0, 30)
D_NEXT = datetime(2026, 10, 19, 8, 0, 5)


def test_fires_once_per_slot_per_day(scheduler, store, permission, in_app):
    permission.record("granted")
    store.save("Amoxicillin", ["08:00", "20:00"], dosage="500mg")

    fired = scheduler.tick(D)
    assert [(n.medicine_name, n.time, n.date) for n in fired] == [("Amoxicillin", "08:00", "2026-10-18")]
    assert fired[0].body == "Time to take your Amoxicillin (500mg)."
    assert store.get_last_notified("Amoxicillin", "08:00") == "2026-10-18"

    # same minute, same date
    assert scheduler.tick(D.replace(second=50)) == []

    # next day fires again
    assert len(scheduler.tick(D_NEXT)) == 1
    assert store.get_last_notified("Amoxicillin", "08:00") == "2026-10-19"
    assert len(in_app.drain()) == 2


def test_no_fire_outside_the_minute(scheduler, store, permission):
    permission.record("granted")
    store.save("A", ["08:00"])
    assert scheduler.tick(datetime(2026, 10, 18, 8, 1)) == []
    assert scheduler.tick(datetime(2026, 10, 18, 7, 59)) == []
    assert store.get_last_notified("A", "08:00") is None


def test_ungranted_permission_suppresses_everything(scheduler, store, permission):
    store.save("A", ["08:00"])
    assert permission.status() == "default"
    assert scheduler.tick(D) == []

    permission.record("denied")
    assert scheduler.tick(D) == []
    assert store.get_last_notified("A", "08:00") is None

    # granting later does not replay the missed slot
    permission.record("granted")
    assert scheduler.tick(D.replace(minute=1)) == []


def test_scans_every_stored_medicine(scheduler, store, permission):
    permission.record("granted")
    store.save("A", ["08:00"])
    store.save("B", ["08:00", "20:00"])
    store.save("C", ["09:00"])

    fired = scheduler.tick(D)
    assert sorted(n.medicine_name for n in fired) == ["A", "B"]


def test_body_without_dosage(scheduler, store, permission):
    permission.record("granted")
    store.save("A", ["08:00"])
    assert scheduler.tick(D)[0].body == "Time to take your A!"


def test_corrupt_record_does_not_stop_other_medicines(scheduler, store, permission):
    permission.record("granted")
    store.kv.set("reminders_Broken", "[not json")
    store.save("Good", ["08:00"])

    fired = scheduler.tick(D)
    assert [n.medicine_name for n in fired] == ["Good"]


def test_failure_for_one_medicine_is_isolated(store, permission, in_app):
    class ExplodingStore(type(store)):
        def load(self, name):
            if name == "Bad":
                raise RuntimeError("boom")
            return super().load(name)

    permission.record("granted")
    exploding = ExplodingStore(store.kv)
    exploding.save("Bad", ["08:00"])
    exploding.save("Good", ["08:00"])

    s = ReminderScheduler(exploding, permission, Notifier(PushChannel(url=""), in_app))
    assert [n.medicine_name for n in s.tick(D)] == ["Good"]


def test_push_preferred_when_configured(store, permission, in_app):
    permission.record("granted")
    store.save("A", ["08:00"])
    push = RecordingPush()

    s = ReminderScheduler(store, permission, Notifier(push, in_app))
    fired = s.tick(D)

    assert fired[0].channel == "push"
    assert len(push.sent) == 1
    assert in_app.drain() == []


def test_push_failure_falls_back_to_in_app(store, permission, in_app):
    permission.record("granted")
    store.save("A", ["08:00"])
    push = FailingPush()

    s = ReminderScheduler(store, permission, Notifier(push, in_app))
    fired = s.tick(D)

    assert push.calls == 1
    assert fired[0].channel == "in_app"
    assert [n.medicine_name for n in in_app.drain()] == ["A"]
    assert store.get_last_notified("A", "08:00") == "2026-10-18"


def test_slot_state_transitions(scheduler, store, permission):
    permission.record("granted")
    store.save("A", ["08:00"])

    assert scheduler.slot_state("A", "08:00", D.replace(hour=7)) == SlotState.IDLE
    assert scheduler.slot_state("A", "08:00", D) == SlotState.ARMED
    scheduler.tick(D)
    assert scheduler.slot_state("A", "08:00", D) == SlotState.FIRED
    assert scheduler.slot_state("A", "08:00", D_NEXT) == SlotState.ARMED


def test_start_ticks_immediately_and_stop_cancels(store, permission, in_app):
    permission.record("granted")
    store.save("A", ["08:00"])
    s = ReminderScheduler(store, permission, Notifier(PushChannel(url=""), in_app), clock=lambda: D)

    async def scenario():
        s.start()
        assert s.running
        s.start()  # already running: no second loop
        await _wait_for(lambda: s.fired_total == 1)
        await s.stop()
        assert not s.running
        await s.stop()

    asyncio.run(scenario())

    assert s.last_tick == D
    assert s.fired_total == 1
    assert s.status().running is False


async def _wait_for(cond, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not cond():
        assert loop.time() < deadline, "condition not reached"
        await asyncio.sleep(0.01)


class FlakyPermission:
    """Raises on the second check, like a locked database."""

    def __init__(self):
        self.checks = 0

    def granted(self):
        self.checks += 1
        if self.checks == 2:
            raise RuntimeError("database is locked")
        return True


def test_loop_survives_a_failed_tick(store, in_app):
    permission = FlakyPermission()
    s = ReminderScheduler(store, permission, Notifier(PushChannel(url=""), in_app), tick_seconds=0)

    async def scenario():
        s.start()
        await _wait_for(lambda: permission.checks >= 4)
        assert s.running
        await s.stop()

    asyncio.run(scenario())
    assert not s.running


class SlowPush(PushChannel):
    def __init__(self):
        super().__init__(url="http://push.invalid/topic")

    def send(self, n):
        time.sleep(0.5)


def test_slow_push_does_not_block_the_event_loop(store, permission, in_app):
    permission.record("granted")
    store.save("A", ["08:00"])
    s = ReminderScheduler(store, permission, Notifier(SlowPush(), in_app), clock=lambda: D)

    async def scenario():
        loop = asyncio.get_running_loop()
        worst = 0.0
        s.start()
        while s.fired_total == 0:
            before = loop.time()
            await asyncio.sleep(0.01)
            worst = max(worst, loop.time() - before)
            assert worst < 0.3
        await s.stop()
        return worst

    assert asyncio.run(scenario()) < 0.3
    assert s.fired_total == 1
