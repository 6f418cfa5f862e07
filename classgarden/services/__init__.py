"""
Class Garden Services
=====================

Aggregation engine for the Class Garden backend.

Services:
- fetcher: batched "in" queries against the record store
- scoring: points earned per submission
- stages: growth-stage classification
- aggregator: per-student metrics
- rankings: per-subject class rankings
- class_summary: persisted class-wide summary
- at_risk: at-risk student detection
- garden: parent-facing garden view
- engagement: weekly study minutes per student
"""

# Services are imported directly when needed to avoid circular imports
# Example: from classgarden.services.aggregator import aggregate_student

__all__ = [
    'fetcher',
    'scoring',
    'stages',
    'aggregator',
    'rankings',
    'class_summary',
    'at_risk',
    'garden',
    'class_data',
    'engagement',
]
