"""
Class data loading: the three input collections for one class, parsed
into records. Submissions have no classId, so they are fetched through
the batched fetcher keyed on the class's assignment ids.
"""
import logging

from classgarden.config import (
    ASSIGNMENTS_TABLE, STUDENTS_TABLE, SUBMISSIONS_TABLE,
    config as default_config,
)
from classgarden.demo_data import demo_tables
from classgarden.models import Assignment, Student, Submission, parse_records
from classgarden.services.aggregator import counted_assignments
from classgarden.services.fetcher import FetchError, fetch_in_batches
from classgarden.store import StoreError

logger = logging.getLogger(__name__)


class ClassData:
    """Parsed students, assignments and submissions for one class."""

    def __init__(self, class_id, students=None, assignments=None, submissions=None, source="store"):
        self.class_id = class_id
        self.students = students or []
        self.assignments = assignments or []
        self.submissions = submissions or []
        self.source = source

    @property
    def counted_assignments(self):
        return counted_assignments(self.assignments)


def load_students(store, class_id):
    try:
        rows = store.select(STUDENTS_TABLE, {"classId": class_id, "isActive": True})
    except StoreError as e:
        raise FetchError(str(e)) from e
    return [s for s in parse_records(Student, rows) if s.is_active]


def load_assignments(store, class_id):
    try:
        rows = store.select(ASSIGNMENTS_TABLE, {"classId": class_id})
    except StoreError as e:
        raise FetchError(str(e)) from e
    return parse_records(Assignment, rows)


def load_submissions(store, assignment_ids, config=None):
    rows = fetch_in_batches(store, SUBMISSIONS_TABLE, "assignmentId", assignment_ids, config)
    return parse_records(Submission, rows)


def load_class_data(class_id, store, config=None):
    """Load and parse everything the engine needs for ``class_id``.

    Raises FetchError when any query fails.
    """
    config = config or default_config
    students = load_students(store, class_id)
    assignments = load_assignments(store, class_id)
    assignment_ids = [a.id for a in counted_assignments(assignments)]
    submissions = load_submissions(store, assignment_ids, config)

    logger.info("Loaded class %s: %d students, %d assignments, %d submissions",
                class_id, len(students), len(assignments), len(submissions))
    return ClassData(class_id, students, assignments, submissions)


def demo_class_data(class_id):
    tables = demo_tables(class_id)
    return ClassData(
        class_id,
        students=parse_records(Student, tables["students"]),
        assignments=parse_records(Assignment, tables["assignments"]),
        submissions=parse_records(Submission, tables["submissions"]),
        source="demo",
    )


def load_class_data_or_demo(class_id, store, config=None):
    """Like load_class_data, but falls back to the demo class on fetch failure."""
    config = config or default_config
    try:
        return load_class_data(class_id, store, config)
    except FetchError as e:
        if not config.use_demo_fallback:
            raise
        logger.warning("Falling back to demo data for class %s: %s", class_id, e)
        return demo_class_data(class_id)
