"""Demo class used when the store is unreachable.

Served in place of live data so dashboards render something sensible
instead of an error banner.
"""
from datetime import datetime, timedelta, timezone

DEMO_STUDENTS = [
    {"id": "demo-s0", "name": "Ava"},
    {"id": "demo-s1", "name": "Ben"},
    {"id": "demo-s2", "name": "Chloe"},
    {"id": "demo-s3", "name": "Diego"},
    {"id": "demo-s4", "name": "Ethan"},
]

DEMO_ASSIGNMENTS = [
    {"id": "demo-a0", "title": "Letter Sounds A-M", "type": "alphabet-time", "points": 20, "status": "active"},
    {"id": "demo-a1", "title": "Letter Sounds N-Z", "type": "alphabet-time", "points": 20, "status": "completed"},
    {"id": "demo-a2", "title": "Animal Words", "type": "vocabulary-time", "points": 10, "status": "active"},
    {"id": "demo-a3", "title": "Picture Book Read-Aloud", "type": "reading-time", "points": 30, "status": "active"},
]

# (student, assignment, status, points, feedback points, minutes, days ago)
DEMO_SUBMISSIONS = [
    ("demo-s0", "demo-a0", "approved", 18, 19, 25, 12),
    ("demo-s0", "demo-a1", "approved", 20, 20, 30, 9),
    ("demo-s0", "demo-a2", "approved", 9, 9, 15, 3),
    ("demo-s0", "demo-a3", "submitted", 0, None, 40, 1),
    ("demo-s1", "demo-a0", "approved", 14, 15, 20, 11),
    ("demo-s1", "demo-a2", "pending", 0, None, 10, 2),
    ("demo-s1", "demo-a3", "missed", 0, None, 0, 1),
    ("demo-s2", "demo-a0", "approved", 12, None, 35, 10),
    ("demo-s2", "demo-a1", "needsRevision", 0, None, 30, 6),
    ("demo-s2", "demo-a3", "approved", 26, 27, 45, 2),
    ("demo-s3", "demo-a2", "submitted", 0, None, 12, 4),
    ("demo-s4", "demo-a0", "completed", 0, None, 18, 8),
]


def demo_tables(class_id, now=None):
    """Rows for a demo class, keyed by collection name."""
    now = now or datetime.now(timezone.utc)
    students = [dict(s, classId=class_id, isActive=True) for s in DEMO_STUDENTS]
    assignments = [dict(a, classId=class_id) for a in DEMO_ASSIGNMENTS]
    submissions = []
    for i, (sid, aid, status, points, fb, minutes, days_ago) in enumerate(DEMO_SUBMISSIONS):
        row = {
            "id": f"demo-sub{i}",
            "assignmentId": aid,
            "studentId": sid,
            "status": status,
            "points": points,
            "completionTimeMinutes": minutes,
            "createdAt": (now - timedelta(days=days_ago)).isoformat(),
        }
        if fb is not None:
            row["feedback"] = {"points": fb, "message": "Nice work!"}
        submissions.append(row)

    return {
        "students": students,
        "assignments": assignments,
        "submissions": submissions,
    }
