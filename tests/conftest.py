"""
Shared test fixtures for Class Garden.
Seeds an in-memory record store with one small class.
Zero network calls — all data from local fixtures.

Fixture class "class-1" (60 counted points: a1 10 + a2 20 + a3 30):
- s1 Alice: a1 feedback 8, a2 submitted/ungraded (half credit 10), a3 27 -> 45 pts, 75%
- s2 Ben:   a1 feedback 9, a2 missed, a3 needsRevision (0)           ->  9 pts, 15%
- s3 Chloe: nothing                                                   ->  0 pts,  0%
- s4 Dan is inactive; a4 is archived and never counted.
"""
from datetime import datetime, timedelta, timezone

import pytest

from classgarden.config import Config
from classgarden.models import Assignment, Student, Submission, parse_records
from classgarden.store import MemoryStore, StoreError

NOW = datetime.now(timezone.utc).replace(microsecond=0)


def _ago(days):
    return (NOW - timedelta(days=days)).isoformat()


STUDENTS = [
    {"id": "s1", "name": "Alice", "classId": "class-1", "parentId": "p1", "isActive": True},
    {"id": "s2", "name": "Ben", "classId": "class-1", "parentId": "p1", "isActive": True},
    {"id": "s3", "name": "Chloe", "classId": "class-1", "parentId": "p2", "isActive": True},
    {"id": "s4", "name": "Dan", "classId": "class-1", "parentId": "p2", "isActive": False},
]

ASSIGNMENTS = [
    {"id": "a1", "classId": "class-1", "title": "Counting", "type": "Math", "points": 10, "status": "active"},
    {"id": "a2", "classId": "class-1", "title": "Shapes", "type": "Math", "points": 20, "status": "active"},
    {"id": "a3", "classId": "class-1", "title": "Story Time", "type": "Reading", "points": 30, "status": "completed"},
    {"id": "a4", "classId": "class-1", "title": "Old Quiz", "type": "Reading", "points": 50, "status": "archived"},
]

SUBMISSIONS = [
    {"id": "sub1", "assignmentId": "a1", "studentId": "s1", "status": "approved", "points": 0,
     "feedback": {"points": 8, "message": "Good"}, "completionTimeMinutes": 20, "createdAt": _ago(2)},
    {"id": "sub2", "assignmentId": "a2", "studentId": "s1", "status": "submitted",
     "completionTimeMinutes": 30, "createdAt": _ago(1)},
    {"id": "sub3", "assignmentId": "a3", "studentId": "s1", "status": "approved", "points": 27,
     "completionTimeMinutes": 40, "createdAt": _ago(10)},
    {"id": "sub4", "assignmentId": "a1", "studentId": "s2", "status": "approved", "points": 10,
     "feedback": {"points": 9}, "completionTimeMinutes": 15, "createdAt": _ago(3)},
    {"id": "sub5", "assignmentId": "a2", "studentId": "s2", "status": "missed",
     "completionTimeMinutes": 0, "createdAt": _ago(3)},
    {"id": "sub6", "assignmentId": "a3", "studentId": "s2", "status": "needsRevision",
     "completionTimeMinutes": 25, "createdAt": _ago(5)},
    # Duplicate for (a1, s1): the first match above wins
    {"id": "sub7", "assignmentId": "a1", "studentId": "s1", "status": "approved",
     "feedback": {"points": 2}, "completionTimeMinutes": 5, "createdAt": _ago(20)},
    {"id": "sub8", "assignmentId": "a4", "studentId": "s3", "status": "approved", "points": 50,
     "completionTimeMinutes": 60, "createdAt": _ago(1)},
]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def tables():
    return {
        "students": [dict(r) for r in STUDENTS],
        "assignments": [dict(r) for r in ASSIGNMENTS],
        "submissions": [dict(r) for r in SUBMISSIONS],
    }


@pytest.fixture
def store(tables):
    """In-memory store holding the fixture class."""
    return MemoryStore(tables)


@pytest.fixture
def garden_config():
    cfg = Config()
    cfg.update({"batch_size": 10, "max_workers": 4, "stage_table": "growth", "use_demo_fallback": True})
    return cfg


@pytest.fixture
def students():
    return [s for s in parse_records(Student, STUDENTS) if s.is_active]


@pytest.fixture
def assignments():
    return parse_records(Assignment, ASSIGNMENTS)


@pytest.fixture
def submissions():
    return parse_records(Submission, [s for s in SUBMISSIONS if s["assignmentId"] != "a4"])


class FailingStore(MemoryStore):
    """MemoryStore whose queries fail once a chosen value shows up."""

    def __init__(self, tables=None, fail_on=None, fail_selects=False):
        super().__init__(tables)
        self.fail_on = fail_on
        self.fail_selects = fail_selects

    def select(self, table, filters=None):
        if self.fail_selects:
            raise StoreError("store unreachable")
        return super().select(table, filters)

    def select_in(self, table, field, values, filters=None):
        if self.fail_on in values:
            self.queries.append((table, field, tuple(values)))
            raise StoreError(f"index missing for {self.fail_on}")
        return super().select_in(table, field, values, filters)


@pytest.fixture
def failing_store(tables):
    """Store that is unreachable for every query."""
    return FailingStore(tables, fail_selects=True)


@pytest.fixture
def app(store, garden_config):
    from classgarden.app import create_app
    app = create_app(store=store, config=garden_config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_failing_store(tables):
    """Factory for stores that fail on a chosen "in" value."""
    def _make(fail_on=None, fail_selects=False, extra=None):
        merged = {k: v + list((extra or {}).get(k, [])) for k, v in tables.items()}
        return FailingStore(merged, fail_on=fail_on, fail_selects=fail_selects)
    return _make
