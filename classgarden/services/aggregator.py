"""
Student Aggregator
==================
Per-student totals: assignments total/completed, points earned/possible,
completion rate and growth stage. Rankings, class summaries, the parent
garden and at-risk flags are all projections over this module's output.
"""
from collections import defaultdict

from classgarden.models import StudentMetrics, SubjectComparison
from classgarden.services.scoring import MISSED_STATUS, resolve_points, round_half_up, safe_percentage
from classgarden.services.stages import GROWTH_STAGES, classify_stage

COUNTED_ASSIGNMENT_STATUSES = frozenset({"active", "completed"})


# ═══════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════

def counted_assignments(assignments):
    """Assignments that count toward totals (active or completed)."""
    return [a for a in assignments if a.status in COUNTED_ASSIGNMENT_STATUSES]


def index_submissions(submissions):
    """Map (assignment_id, student_id) to the first matching submission.

    Later duplicates for the same pair are ignored.
    """
    index = {}
    for sub in submissions:
        index.setdefault((sub.assignment_id, sub.student_id), sub)
    return index


def total_assignment_points(assignments):
    return sum(a.points for a in counted_assignments(assignments))


# ═══════════════════════════════════════════════════════
# AGGREGATION
# ═══════════════════════════════════════════════════════

def aggregate_student(student, assignments, submissions, table=GROWTH_STAGES, index=None):
    """Compute StudentMetrics for one student."""
    if index is None:
        index = index_submissions(submissions)

    total_points = 0
    earned_points = 0
    completed = 0
    counted = counted_assignments(assignments)

    for assignment in counted:
        total_points += assignment.points
        sub = index.get((assignment.id, student.id))
        if sub is None or sub.status == MISSED_STATUS:
            continue
        completed += 1
        earned_points += resolve_points(sub, assignment.points)

    rate = safe_percentage(earned_points, total_points)
    return StudentMetrics(
        id=student.id,
        name=student.name,
        completion_rate=rate,
        stage=classify_stage(rate, table),
        total_assignments=len(counted),
        completed_assignments=completed,
        total_points=total_points,
        earned_points=earned_points,
    )


def aggregate_class(students, assignments, submissions, table=GROWTH_STAGES):
    """StudentMetrics for every student, in roster order."""
    index = index_submissions(submissions)
    return [aggregate_student(s, assignments, submissions, table, index=index) for s in students]


def subject_comparison(student_id, assignments, submissions):
    """Average graded score per subject for one student next to the class average."""
    by_assignment = defaultdict(list)
    for (assignment_id, sid), sub in index_submissions(submissions).items():
        by_assignment[assignment_id].append((sid, sub))

    class_scores = defaultdict(list)
    child_scores = defaultdict(list)
    subjects = set()

    for assignment in counted_assignments(assignments):
        subjects.add(assignment.type)
        for sid, sub in by_assignment[assignment.id]:
            points = resolve_points(sub, assignment.points)
            if points <= 0:
                continue
            class_scores[assignment.type].append(points)
            if sid == student_id:
                child_scores[assignment.type].append(points)

    def _avg(vals):
        return round_half_up(sum(vals) / len(vals)) if vals else 0

    return [
        SubjectComparison(subject=s, child_avg=_avg(child_scores[s]), class_avg=_avg(class_scores[s]))
        for s in sorted(subjects)
    ]
