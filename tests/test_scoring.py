"""
Test: Score resolver — feedback, raw points, partial credit, missed work.
"""
import pytest

from classgarden.models import Submission
from classgarden.services.scoring import resolve_points, round_half_up, safe_percentage


def _sub(**kwargs):
    data = {"assignmentId": "a1", "studentId": "s1"}
    data.update(kwargs)
    return Submission.model_validate(data)


class TestResolvePoints:
    def test_feedback_points_win(self):
        sub = _sub(status="approved", points=5, feedback={"points": 8})
        assert resolve_points(sub, 10) == 8

    def test_raw_points_when_no_feedback(self):
        assert resolve_points(_sub(status="approved", points=7), 10) == 7

    def test_zero_feedback_falls_through_to_points(self):
        sub = _sub(status="approved", points=6, feedback={"points": 0})
        assert resolve_points(sub, 10) == 6

    def test_partial_credit_for_ungraded_submitted(self):
        assert resolve_points(_sub(status="submitted"), 20) == 10

    @pytest.mark.parametrize("status", ["approved", "submitted", "pending", "completed"])
    def test_partial_credit_statuses(self, status):
        assert resolve_points(_sub(status=status, points=0), 30) == 15

    def test_partial_credit_rounds_half_up(self):
        assert resolve_points(_sub(status="pending"), 5) == 3

    def test_missed_is_zero(self):
        assert resolve_points(_sub(status="missed"), 20) == 0

    def test_needs_revision_without_score_is_zero(self):
        assert resolve_points(_sub(status="needsRevision"), 20) == 0

    def test_needs_revision_with_score(self):
        assert resolve_points(_sub(status="needsRevision", feedback={"points": 4}), 20) == 4

    def test_no_submission(self):
        assert resolve_points(None, 20) == 0

    def test_zero_point_assignment(self):
        assert resolve_points(_sub(status="submitted"), 0) == 0

    def test_deterministic(self):
        sub = _sub(status="submitted")
        assert resolve_points(sub, 20) == resolve_points(sub, 20)

    def test_fractional_score_passes_through(self):
        sub = _sub(status="approved", feedback={"points": 7.5})
        assert resolve_points(sub, 10) == 7.5

    def test_missing_status_earns_nothing(self):
        assert resolve_points(_sub(), 20) == 0


class TestRounding:
    def test_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(26.5) == 27

    def test_below_half(self):
        assert round_half_up(26.49) == 26

    def test_percentage(self):
        assert safe_percentage(8, 30) == 27

    def test_percentage_zero_total(self):
        assert safe_percentage(8, 0) == 0

    def test_percentage_capped_at_100(self):
        assert safe_percentage(25, 20) == 100
