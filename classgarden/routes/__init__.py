"""
Class Garden API Routes
=======================

All API route blueprints for the Class Garden application.

Usage:
    from classgarden.routes import register_routes
    register_routes(app)
"""
from .metrics_routes import metrics_bp, init_metrics_routes


def register_routes(app, store=None, config=None):
    """Register all route blueprints with the Flask app."""

    # Initialize metrics routes with the store to read from, if provided
    init_metrics_routes(store, config)

    app.register_blueprint(metrics_bp)


__all__ = [
    'register_routes',
    'metrics_bp',
    'init_metrics_routes',
]
