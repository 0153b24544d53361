"""
Shared pytest setup.

Environment overrides must be in place before backend.src.web.config is
imported, because the global config is read once at import time.
"""

import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("TASKS_RATE_LIMIT", "1000/minute")
os.environ.setdefault("TASKS_STORE_BACKEND", "sqlite")

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from backend.src.db import reset_task_store
from backend.src.services.tasks import TaskRequestHandler

from fakes import FakeTaskStore


@pytest.fixture()
def store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest.fixture()
def handler(store: FakeTaskStore) -> TaskRequestHandler:
    return TaskRequestHandler(store)


@pytest.fixture(autouse=True)
def _fresh_global_store():
    reset_task_store()
    yield
    reset_task_store()
