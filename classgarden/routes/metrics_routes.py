"""
Metrics API routes for Class Garden.
Provides student growth metrics, subject rankings, class summaries and
the parent garden view.
"""
import logging
from flask import Blueprint, request, jsonify

from classgarden.config import config as app_config
from classgarden.services.aggregator import aggregate_class, subject_comparison, total_assignment_points
from classgarden.services.at_risk import at_risk_threshold, detect_at_risk
from classgarden.services.class_data import load_class_data_or_demo
from classgarden.services.class_summary import build_or_update, get_or_create_summary
from classgarden.services.engagement import weekly_engagement
from classgarden.services.fetcher import FetchError
from classgarden.services.garden import garden_for_parent
from classgarden.services.rankings import rank_students
from classgarden.services.stages import get_stage_table
from classgarden.store import StoreError, SupabaseStore

logger = logging.getLogger(__name__)

metrics_bp = Blueprint('metrics', __name__)

# These can be set by the app factory during initialization
store = None
config = app_config


def init_metrics_routes(store_ref=None, config_ref=None):
    """Initialize metrics routes with the record store and config to use."""
    global store, config
    store = store_ref
    config = config_ref or app_config


def get_store():
    """Get or create the record store."""
    global store
    if store is None:
        store = SupabaseStore(url=config.supabase_url, key=config.supabase_key)
    return store


def _class_metrics(class_id):
    data = load_class_data_or_demo(class_id, get_store(), config)
    table = get_stage_table(config.stage_table)
    metrics = aggregate_class(data.students, data.assignments, data.submissions, table)
    return data, metrics


# ============ Class Endpoints ============

@metrics_bp.route('/api/classes/<class_id>/metrics')
def get_class_metrics(class_id):
    """Per-student completion metrics for a class."""
    try:
        data, metrics = _class_metrics(class_id)
    except FetchError as e:
        logger.error("Failed to load metrics for class %s: %s", class_id, e)
        return jsonify({"error": str(e), "students": []}), 503

    total_points = total_assignment_points(data.assignments)
    at_risk = detect_at_risk(metrics, total_points)
    return jsonify({
        "classId": class_id,
        "students": [m.to_json() for m in metrics],
        "atRisk": sorted(at_risk),
        "totalPoints": total_points,
        "source": data.source,
    })


@metrics_bp.route('/api/classes/<class_id>/rankings')
def get_class_rankings(class_id):
    """Subject rankings for a class. Optional ?subject= filter."""
    subject = request.args.get('subject')
    try:
        data = load_class_data_or_demo(class_id, get_store(), config)
    except FetchError as e:
        logger.error("Failed to load rankings for class %s: %s", class_id, e)
        return jsonify({"error": str(e), "rankings": []}), 503

    rows = rank_students(class_id, data.assignments, data.students, data.submissions)
    subjects = sorted({r.subject for r in rows})
    if subject:
        rows = [r for r in rows if r.subject == subject]

    return jsonify({
        "classId": class_id,
        "rankings": [r.to_json() for r in rows],
        "subjects": subjects,
        "source": data.source,
    })


@metrics_bp.route('/api/classes/<class_id>/at-risk')
def get_at_risk_students(class_id):
    """Students whose earned points are under 40% of the class total."""
    try:
        data, metrics = _class_metrics(class_id)
    except FetchError as e:
        logger.error("Failed to load at-risk students for class %s: %s", class_id, e)
        return jsonify({"error": str(e), "atRisk": []}), 503

    total_points = total_assignment_points(data.assignments)
    flagged = detect_at_risk(metrics, total_points)
    return jsonify({
        "classId": class_id,
        "atRisk": [m.to_json() for m in metrics if m.id in flagged],
        "threshold": at_risk_threshold(total_points),
        "totalPoints": total_points,
        "source": data.source,
    })


@metrics_bp.route('/api/classes/<class_id>/summary', methods=['GET'])
def get_class_summary(class_id):
    """Stored class summary; created with all students as seeds if missing."""
    try:
        summary = get_or_create_summary(class_id, get_store(), config)
    except (FetchError, StoreError) as e:
        logger.error("Failed to get summary for class %s: %s", class_id, e)
        return jsonify({"error": str(e)}), 503
    return jsonify(summary.to_json())


@metrics_bp.route('/api/classes/<class_id>/summary', methods=['POST'])
def refresh_class_summary(class_id):
    """Recompute and store the class summary."""
    data = request.get_json(silent=True) or {}
    try:
        summary = build_or_update(class_id, get_store(), config, class_name=data.get('className', ''))
    except (FetchError, StoreError) as e:
        logger.error("Failed to update summary for class %s: %s", class_id, e)
        return jsonify({"error": str(e)}), 500
    return jsonify(summary.to_json())


# ============ Student / Parent Endpoints ============

@metrics_bp.route('/api/students/<student_id>/subjects')
def get_student_subjects(student_id):
    """A student's per-subject average next to the class average."""
    class_id = request.args.get('classId')
    if not class_id:
        return jsonify({"subjects": []})

    try:
        data = load_class_data_or_demo(class_id, get_store(), config)
    except FetchError as e:
        logger.error("Failed to load subjects for student %s: %s", student_id, e)
        return jsonify({"error": str(e), "subjects": []}), 503

    rows = subject_comparison(student_id, data.assignments, data.submissions)
    return jsonify({
        "studentId": student_id,
        "classId": class_id,
        "subjects": [r.to_json() for r in rows],
        "source": data.source,
    })


@metrics_bp.route('/api/students/<student_id>/engagement')
def get_student_engagement(student_id):
    """Study minutes this week against the recommended weekly minutes."""
    try:
        engagement = weekly_engagement(student_id, get_store(), config)
    except FetchError as e:
        logger.error("Failed to load engagement for student %s: %s", student_id, e)
        return jsonify({
            "error": str(e),
            "minutes": 0,
            "recommendedMinutes": config.recommended_weekly_minutes,
        }), 503
    return jsonify(engagement.to_json())


@metrics_bp.route('/api/parents/<parent_id>/garden')
def get_parent_garden(parent_id):
    """Class summaries and own-children metrics for a parent."""
    try:
        view = garden_for_parent(parent_id, get_store(), config)
    except FetchError as e:
        logger.error("Error getting garden data for parent %s: %s", parent_id, e)
        return jsonify({"classSummaries": [], "ownChildrenData": []})
    return jsonify(view.to_json())
