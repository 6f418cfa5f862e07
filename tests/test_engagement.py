"""
Test: Weekly engagement — ISO week window, study log, submission fallback.
"""
from datetime import date, datetime, timezone

import pytest

from classgarden.services.engagement import iso_week, weekly_engagement
from classgarden.services.fetcher import FetchError
from classgarden.store import MemoryStore

# Wednesday of ISO week 2, 2026 (Mon Jan 5 - Sun Jan 11)
WEDNESDAY = datetime(2026, 1, 7, 12, 0, tzinfo=timezone.utc)

STUDY_LOG = [
    {"id": "t1", "studentId": "kid", "date": "2026-01-05T08:00:00Z", "minutes": 30},
    {"id": "t2", "studentId": "kid", "date": "2026-01-11", "minutes": 20},
    {"id": "t3", "studentId": "kid", "date": {"seconds": 1767607200}, "totalMinutes": 5},
    {"id": "t4", "studentId": "kid", "date": "2026-01-04T23:59:00Z", "minutes": 45},
    {"id": "t5", "studentId": "kid", "date": "2026-01-12T00:00:00Z", "minutes": 10},
    {"id": "t6", "studentId": "kid", "minutes": 15},
    {"id": "t7", "studentId": "other", "date": "2026-01-06", "minutes": 99},
]


@pytest.fixture
def study_store(tables):
    return MemoryStore(dict(tables, studyTime=[dict(r) for r in STUDY_LOG]))


class TestIsoWeek:
    def test_year_boundary(self):
        # Dec 29 2025 is Monday of ISO week 1 of 2026
        assert iso_week(datetime(2025, 12, 29, tzinfo=timezone.utc)) == (2026, 1)
        assert iso_week(datetime(2026, 1, 1, tzinfo=timezone.utc)) == (2026, 1)


class TestWeeklyEngagement:
    def test_sums_current_week_only(self, study_store, garden_config):
        result = weekly_engagement("kid", study_store, garden_config, now=WEDNESDAY)
        assert result.minutes == 55
        assert result.source == "studyTime"
        assert result.week_start == date(2026, 1, 5)

    def test_recommended_default(self, study_store, garden_config):
        result = weekly_engagement("kid", study_store, garden_config, now=WEDNESDAY)
        assert result.recommended_minutes == 180

    def test_recommended_from_config(self, study_store, garden_config):
        garden_config.update({"recommended_weekly_minutes": 120})
        result = weekly_engagement("kid", study_store, garden_config, now=WEDNESDAY)
        assert result.recommended_minutes == 120

    def test_week_spanning_new_year(self, garden_config):
        store = MemoryStore({"studyTime": [
            {"studentId": "kid", "date": "2025-12-29T10:00:00Z", "minutes": 40},
            {"studentId": "kid", "date": "2025-12-28T10:00:00Z", "minutes": 50},
        ]})
        now = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)
        assert weekly_engagement("kid", store, garden_config, now=now).minutes == 40

    def test_falls_back_to_submission_minutes(self, garden_config):
        store = MemoryStore({"submissions": [
            {"id": "x1", "assignmentId": "a1", "studentId": "kid", "status": "approved",
             "completionTimeMinutes": 12, "createdAt": "2026-01-06T10:00:00Z"},
            {"id": "x2", "assignmentId": "a2", "studentId": "kid", "status": "approved",
             "completionTimeMinutes": 25, "createdAt": "2026-01-01T10:00:00Z"},
        ]})
        result = weekly_engagement("kid", store, garden_config, now=WEDNESDAY)
        assert result.minutes == 12
        assert result.source == "submissions"

    def test_no_activity(self, garden_config):
        result = weekly_engagement("kid", MemoryStore({}), garden_config, now=WEDNESDAY)
        assert result.minutes == 0
        assert result.recommended_minutes == 180

    def test_store_unreachable(self, failing_store, garden_config):
        with pytest.raises(FetchError):
            weekly_engagement("s1", failing_store, garden_config, now=WEDNESDAY)

    def test_json_shape(self, study_store, garden_config):
        data = weekly_engagement("kid", study_store, garden_config, now=WEDNESDAY).to_json()
        assert data == {
            "studentId": "kid",
            "weekStart": "2026-01-05",
            "minutes": 55,
            "recommendedMinutes": 180,
            "source": "studyTime",
        }
