#!/usr/bin/env python3
"""
Class Garden - Student Growth Metrics
=====================================
Run: python3 -m classgarden.app
Then query: http://localhost:3000/api/classes/<class_id>/metrics
"""

import logging

from flask import Flask, jsonify
from flask_cors import CORS

from classgarden.config import HOST, PORT, DEBUG, config as app_config
from classgarden.routes import register_routes


def create_app(store=None, config=None):
    """Build the Flask app. ``store`` defaults to Supabase, created on first use."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    app = Flask(__name__)
    CORS(app)

    register_routes(app, store=store, config=config or app_config)

    @app.route('/api/health')
    def health():
        return jsonify({"status": "ok"})

    return app


if __name__ == '__main__':
    app = create_app()
    print(f"Class Garden running on http://{HOST}:{PORT}")
    app.run(host=HOST, port=PORT, debug=DEBUG)
