"""Shared fixtures for the presence tests."""

import os

# Settings are read at import time; keep tests off Firestore and the log file.
os.environ.setdefault("PRESENCE_BACKEND", "memory")
os.environ.setdefault("LOG_FILE", "")

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from app.models.student import Student
from app.services.attendance_service import AttendanceService
from app.services.directory_service import InMemoryDirectory
from app.services.event_store import InMemoryEventStore
from app.services.presence_aggregator import PresenceAggregator
from app.services.presence_ledger import PresenceLedger
from app.utils.executor import create_store_executor

TZ = ZoneInfo("America/Bogota")


class ManualClock:
    """Clock whose time only moves when a test says so."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return ManualClock(datetime(2026, 10, 16, 8, 0, tzinfo=TZ))


@pytest.fixture
def students():
    return [
        Student(enrollment_number="42", name="Ada", department="CS", batch="2024", semester=3),
        Student(enrollment_number="0007", name="Bond", department="EE", batch="2023", semester=5),
        Student(enrollment_number="100", name="Grace", department="CS", batch="2022", semester=7),
    ]


@pytest.fixture
def directory(students):
    return InMemoryDirectory(students)


@pytest.fixture
def store():
    return InMemoryEventStore()


@pytest.fixture
def executor():
    pool = create_store_executor(max_workers=4)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def ledger(store, clock, executor):
    return PresenceLedger(store, clock=clock, max_attempts=3, executor=executor)


@pytest.fixture
def aggregator(store, directory, clock, executor):
    return PresenceAggregator(store, directory, clock=clock, executor=executor)


@pytest.fixture
def service(directory, ledger, aggregator):
    return AttendanceService(directory, ledger, aggregator)
