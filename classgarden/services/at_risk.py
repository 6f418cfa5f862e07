"""
At-Risk Detector
================
Flags students whose earned points fall under 40% of the class total.
"""
from classgarden.config import AT_RISK_RATIO


def at_risk_threshold(total_assignment_points):
    return total_assignment_points * AT_RISK_RATIO


def detect_at_risk(metrics, total_assignment_points):
    """Return the ids of at-risk students. Empty classes flag nobody."""
    if not total_assignment_points or total_assignment_points <= 0:
        return set()
    threshold = at_risk_threshold(total_assignment_points)
    return {m.id for m in metrics if m.earned_points < threshold}
