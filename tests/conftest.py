"""
Pytest configuration: isolated database, no LLM calls, no background loop.
Environment must be set before any mediscan module is imported.
"""

import os
import tempfile
from pathlib import Path

import pytest

_TMP_DIR = Path(tempfile.mkdtemp(prefix="mediscan-tests-"))
os.environ["MEDISCAN_DB_PATH"] = str(_TMP_DIR / "mediscan-test.db")
os.environ["USE_LLM_ANALYSIS"] = "false"
os.environ["AUTO_START_SCHEDULER"] = "false"
os.environ["REMINDER_PUSH_URL"] = ""


@pytest.fixture(autouse=True)
def clean_storage():
    from mediscan.services.notifier import in_app_channel
    from mediscan.services.reminder_store import kv_store

    kv_store.clear()
    in_app_channel.drain()
    yield
    kv_store.clear()


@pytest.fixture
def store():
    from mediscan.services.reminder_store import reminder_store

    return reminder_store


@pytest.fixture
def permission():
    from mediscan.services.permission import notification_permission

    return notification_permission
