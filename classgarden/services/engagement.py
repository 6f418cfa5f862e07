"""
Weekly Engagement
=================
Minutes a student studied during the current ISO week (Monday to Sunday,
UTC), next to the recommended weekly amount. Minutes come from the
``studyTime`` log; a student with no log entries at all falls back to the
completion minutes recorded on their submissions.
"""
import logging
from datetime import datetime, timedelta, timezone

from classgarden.config import STUDY_TIME_TABLE, SUBMISSIONS_TABLE, config as default_config
from classgarden.models import StudyTimeEntry, Submission, WeeklyEngagement, parse_records
from classgarden.services.fetcher import FetchError
from classgarden.services.scoring import round_half_up
from classgarden.store import StoreError

logger = logging.getLogger(__name__)


def iso_week(moment):
    """(ISO year, ISO week) of ``moment`` in UTC."""
    return tuple(moment.astimezone(timezone.utc).isocalendar()[:2])


def week_start(now):
    day = now.astimezone(timezone.utc).date()
    return day - timedelta(days=day.weekday())


def minutes_this_week(items, now, when, minutes):
    """Sum ``minutes(item)`` over items whose ``when(item)`` is in now's ISO week.

    Undated items are skipped.
    """
    week = iso_week(now)
    total = 0
    for item in items:
        moment = when(item)
        if moment is not None and iso_week(moment) == week:
            total += minutes(item)
    return round_half_up(total)


def weekly_engagement(student_id, store, config=None, now=None):
    config = config or default_config
    now = now or datetime.now(timezone.utc)

    try:
        entries = parse_records(StudyTimeEntry, store.select(STUDY_TIME_TABLE, {"studentId": student_id}))
        if entries:
            source = "studyTime"
            minutes = minutes_this_week(entries, now, lambda e: e.logged_at, lambda e: e.minutes)
        else:
            source = "submissions"
            subs = parse_records(Submission, store.select(SUBMISSIONS_TABLE, {"studentId": student_id}))
            minutes = minutes_this_week(subs, now, lambda s: s.timestamp, lambda s: s.completion_time_minutes)
    except StoreError as e:
        raise FetchError(str(e)) from e

    logger.debug("Student %s studied %d minutes this week (from %s)", student_id, minutes, source)
    return WeeklyEngagement(
        student_id=student_id,
        week_start=week_start(now),
        minutes=minutes,
        recommended_minutes=config.recommended_weekly_minutes,
        source=source,
    )
