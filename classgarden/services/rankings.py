"""
Ranking Engine
==============
Subject-level class rankings. Assignments are grouped by their ``type``
tag; within each subject every active student gets one row, ranked by
total resolved score.
"""
import logging
from collections import defaultdict

from classgarden.models import RankingRow
from classgarden.services.aggregator import counted_assignments, index_submissions
from classgarden.services.scoring import resolve_points, round_half_up

logger = logging.getLogger(__name__)


def _subject_row(student, subject, subject_assignments, index):
    total = 0
    graded = 0
    matched = 0
    for assignment in subject_assignments:
        sub = index.get((assignment.id, student.id))
        if sub is None:
            continue
        matched += 1
        points = resolve_points(sub, assignment.points)
        total += points
        if points > 0:
            graded += 1

    return RankingRow(
        student_id=student.id,
        student_name=student.name,
        subject=subject,
        avg_score=round_half_up(total / graded) if graded else 0,
        total_score=total,
        submissions=matched,
        graded_submissions=graded,
    )


def rank_subject(subject, subject_assignments, students, index):
    """Rank every student for one subject.

    Sorted by total score descending, ties broken by student id. Students
    with no submissions in the subject are listed last with rank 0.
    """
    rows = [_subject_row(s, subject, subject_assignments, index) for s in students]
    ranked = sorted((r for r in rows if r.submissions > 0),
                    key=lambda r: (-r.total_score, r.student_id))
    unranked = sorted((r for r in rows if r.submissions == 0), key=lambda r: r.student_id)

    for position, row in enumerate(ranked, start=1):
        row.rank = position
    return ranked + unranked


def rank_students(class_id, assignments, students, submissions):
    """RankingRow for every (student, subject) pair in the class."""
    by_subject = defaultdict(list)
    for assignment in counted_assignments(assignments):
        if assignment.class_id in (None, class_id):
            by_subject[assignment.type].append(assignment)

    index = index_submissions(submissions)
    rows = []
    for subject in sorted(by_subject):
        rows.extend(rank_subject(subject, by_subject[subject], students, index))

    logger.debug("Ranked %d students across %d subjects for class %s",
                 len(students), len(by_subject), class_id)
    return rows
