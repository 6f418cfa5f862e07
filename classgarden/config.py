"""
Configuration management for the Class Garden backend.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent.parent
PACKAGE_DIR = Path(__file__).parent

# Store configuration
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "")

# Collections
STUDENTS_TABLE = "students"
ASSIGNMENTS_TABLE = "assignments"
SUBMISSIONS_TABLE = "submissions"
SUMMARIES_TABLE = "classSummaries"
STUDY_TIME_TABLE = "studyTime"

# The store rejects "in" filters with more than this many values
MAX_IN_VALUES = 10

# Fetch configuration
DEFAULT_BATCH_SIZE = int(os.getenv("BATCH_SIZE", MAX_IN_VALUES))
DEFAULT_FETCH_WORKERS = int(os.getenv("FETCH_WORKERS", 4))

# Grading configuration
STAGE_TABLE = os.getenv("STAGE_TABLE", "growth")
PARTIAL_CREDIT_RATIO = 0.5
AT_RISK_RATIO = 0.4
RECENT_ACTIVITY_DAYS = 7
RECOMMENDED_WEEKLY_MINUTES = int(os.getenv("RECOMMENDED_WEEKLY_MINUTES", 180))

# Server configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))
DEBUG = os.getenv("DEBUG", "false").lower() == "true"


class Config:
    """Application configuration class."""

    def __init__(self):
        self.supabase_url = SUPABASE_URL
        self.supabase_key = SUPABASE_SERVICE_KEY
        self.batch_size = DEFAULT_BATCH_SIZE
        self.max_workers = DEFAULT_FETCH_WORKERS
        self.stage_table = STAGE_TABLE
        self.use_demo_fallback = True
        self.recommended_weekly_minutes = RECOMMENDED_WEEKLY_MINUTES

    @property
    def chunk_size(self):
        """Effective batch size; never above the store's "in" limit."""
        return max(1, min(int(self.batch_size), MAX_IN_VALUES))

    def to_dict(self):
        return {
            "supabase_url": self.supabase_url,
            "batch_size": self.batch_size,
            "max_workers": self.max_workers,
            "stage_table": self.stage_table,
            "use_demo_fallback": self.use_demo_fallback,
            "recommended_weekly_minutes": self.recommended_weekly_minutes,
        }

    def update(self, data: dict):
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)


# Global config instance
config = Config()
