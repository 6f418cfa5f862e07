"""
Score Resolver
==============
Single source of truth for how many points a submission contributes.
Every total in the engine (student metrics, subject rankings, at-risk
flags) goes through ``resolve_points``.
"""
import math

from classgarden.config import PARTIAL_CREDIT_RATIO

# Work that is done but may not be graded yet
COMPLETED_STATUSES = frozenset({"approved", "submitted", "pending", "completed"})
MISSED_STATUS = "missed"


def round_half_up(value):
    """Round .5 away from zero for non-negative values (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def _positive(val):
    return isinstance(val, (int, float)) and not isinstance(val, bool) and val > 0


def resolve_points(submission, assignment_points):
    """
    Points earned by ``submission`` on an assignment worth ``assignment_points``.

    Priority: grader feedback score, then raw score, then half credit for
    completed-but-ungraded work, else 0.
    """
    if submission is None:
        return 0

    feedback = submission.feedback
    if feedback is not None and _positive(feedback.points):
        return feedback.points

    if _positive(submission.points):
        return submission.points

    if submission.status in COMPLETED_STATUSES:
        return round_half_up(max(0, assignment_points) * PARTIAL_CREDIT_RATIO)

    return 0


def safe_percentage(part, whole):
    """round(part / whole * 100) capped to 0..100, or 0 when whole is not positive."""
    if not whole or whole <= 0:
        return 0
    return max(0, min(100, round_half_up(part / whole * 100)))
