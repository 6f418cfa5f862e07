"""
Class Summary Builder
=====================
Aggregates every student's metrics into one class-wide summary document
and upserts it under the class id. The summary is a best-effort cache:
concurrent rebuilds race and the last write wins.
"""
import logging
from datetime import datetime, timedelta, timezone

from classgarden.config import RECENT_ACTIVITY_DAYS, SUMMARIES_TABLE, config as default_config
from classgarden.models import ClassSummary, RecentActivity, parse_records
from classgarden.services.aggregator import aggregate_class, counted_assignments
from classgarden.services.class_data import load_assignments, load_class_data, load_students
from classgarden.services.scoring import COMPLETED_STATUSES, round_half_up
from classgarden.services.stages import empty_distribution, get_stage_table

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════
# PURE COMPUTATION
# ═══════════════════════════════════════════════════════

def performance_distribution(metrics, table):
    distribution = empty_distribution(table)
    for m in metrics:
        distribution[m.stage] += 1
    return distribution


def recent_activity(submissions, total_students, now, days=RECENT_ACTIVITY_DAYS):
    """Submission activity in the ``days`` before ``now``."""
    since = now - timedelta(days=days)
    recent = [s for s in submissions if s.timestamp is not None and since <= s.timestamp <= now]
    study_minutes = sum(s.completion_time_minutes for s in recent)
    return RecentActivity(
        new_submissions=len(recent),
        completed_assignments=sum(1 for s in recent if s.status in COMPLETED_STATUSES),
        average_study_time=round_half_up(study_minutes / total_students) if total_students else 0,
    )


def summarize_class(class_data, table, now, class_name=""):
    """Build a ClassSummary from already-loaded class data."""
    metrics = aggregate_class(class_data.students, class_data.assignments,
                              class_data.submissions, table)
    total_students = len(metrics)
    average = round_half_up(sum(m.completion_rate for m in metrics) / total_students) if total_students else 0

    return ClassSummary(
        class_id=class_data.class_id,
        class_name=class_name,
        total_students=total_students,
        average_completion_rate=average,
        total_assignments=len(class_data.counted_assignments),
        completed_assignments=sum(m.completed_assignments for m in metrics),
        performance_distribution=performance_distribution(metrics, table),
        recent_activity=recent_activity(class_data.submissions, total_students, now),
        last_updated=now,
    )


def initial_summary(class_id, total_students, total_assignments, table, now, class_name=""):
    """Placeholder summary: every student starts as a seed."""
    distribution = empty_distribution(table)
    distribution[table[0][1]] = total_students
    return ClassSummary(
        class_id=class_id,
        class_name=class_name or f"Class {class_id[-4:]}",
        total_students=total_students,
        total_assignments=total_assignments,
        performance_distribution=distribution,
        last_updated=now,
    )


# ═══════════════════════════════════════════════════════
# PERSISTENCE
# ═══════════════════════════════════════════════════════

def save_summary(store, summary):
    store.upsert(SUMMARIES_TABLE, summary.to_json(), "classId")
    return summary


def build_or_update(class_id, store, config=None, now=None, class_name=""):
    """Recompute the class summary and upsert it by class id."""
    config = config or default_config
    now = now or datetime.now(timezone.utc)
    table = get_stage_table(config.stage_table)

    class_data = load_class_data(class_id, store, config)
    summary = summarize_class(class_data, table, now, class_name)
    save_summary(store, summary)

    logger.info("Updated summary for class %s: %d students, avg completion %d%%",
                class_id, summary.total_students, summary.average_completion_rate)
    return summary


def get_summary(class_id, store):
    row = store.get(SUMMARIES_TABLE, "classId", class_id)
    parsed = parse_records(ClassSummary, [row]) if row else []
    return parsed[0] if parsed else None


def get_or_create_summary(class_id, store, config=None, now=None):
    """Return the stored summary, creating an all-seed one if none exists."""
    config = config or default_config
    summary = get_summary(class_id, store)
    if summary is not None:
        return summary

    now = now or datetime.now(timezone.utc)
    table = get_stage_table(config.stage_table)
    students = load_students(store, class_id)
    assignments = counted_assignments(load_assignments(store, class_id))
    summary = initial_summary(class_id, len(students), len(assignments), table, now)
    save_summary(store, summary)
    logger.info("Created initial summary for class %s", class_id)
    return summary
