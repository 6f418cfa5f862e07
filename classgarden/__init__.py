"""
Class Garden Backend Package
============================

Flask-based backend that turns assignment and submission records into
student growth metrics, subject rankings and class summaries.

Structure:
- routes/: API route blueprints
- services/: Aggregation engine
- models.py: Record and result models
- store.py: Record store adapters
- config.py: Configuration management
"""

from .config import config, Config

__version__ = "1.0.0"

__all__ = ['config', 'Config']
