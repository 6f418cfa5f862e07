"""
Record and result models for Class Garden.

Raw store rows arrive with camelCase keys and loosely typed values. They are
validated and coerced into these models once, by ``parse_records``, and the
aggregation services only ever see the parsed shapes.
"""
import logging
import math
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

Number = Union[int, float]


def _coerce_points(val):
    """Scores may arrive as int, float, numeric string, or garbage."""
    if val is None or isinstance(val, bool):
        return None
    try:
        num = float(val)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(num):
        return None
    return int(num) if num.is_integer() else num


def _as_utc(val):
    if isinstance(val, datetime) and val.tzinfo is None:
        return val.replace(tzinfo=timezone.utc)
    return val


_DATETIME = TypeAdapter(datetime)


def _coerce_datetime(val):
    """Timestamps may arrive as ISO strings, plain dates, epoch numbers,
    ``{"seconds": ...}`` documents, or garbage. Garbage becomes None."""
    if val is None or val == "" or isinstance(val, bool):
        return None
    if isinstance(val, dict):
        seconds = _coerce_points(val.get("seconds", val.get("_seconds")))
        if seconds is None:
            return None
        nanos = _coerce_points(val.get("nanoseconds", val.get("_nanoseconds"))) or 0
        val = seconds + nanos / 1e9
    if isinstance(val, date) and not isinstance(val, datetime):
        return datetime(val.year, val.month, val.day, tzinfo=timezone.utc)
    try:
        return _as_utc(_DATETIME.validate_python(val))
    except ValidationError:
        pass
    if isinstance(val, str):
        try:
            day = date.fromisoformat(val.strip())
        except ValueError:
            return None
        return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return None


class GardenModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# ═══════════════════════════════════════════════════════
# INPUT RECORDS
# ═══════════════════════════════════════════════════════

class Student(GardenModel):
    id: str
    name: str = "Student"
    class_id: Optional[str] = None
    parent_id: Optional[str] = None
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, v):
        return v or "Student"


class Assignment(GardenModel):
    id: str
    class_id: Optional[str] = None
    title: str = ""
    type: str = "Other"
    points: int = 0
    status: str = "active"
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, v):
        return (str(v).strip() if v else "") or "Other"

    @field_validator("due_date", "created_at", mode="before")
    @classmethod
    def _timestamps(cls, v):
        return _coerce_datetime(v)

    @field_validator("points", mode="before")
    @classmethod
    def _non_negative_points(cls, v):
        num = _coerce_points(v)
        return max(0, int(round(num))) if num is not None else 0


class Feedback(GardenModel):
    points: Optional[Number] = None
    message: str = ""

    @field_validator("points", mode="before")
    @classmethod
    def _numeric(cls, v):
        return _coerce_points(v)


class Submission(GardenModel):
    id: str = ""
    assignment_id: str
    student_id: str
    status: str = ""
    points: Optional[Number] = None
    feedback: Optional[Feedback] = None
    completion_time_minutes: Number = 0
    created_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None

    @field_validator("points", mode="before")
    @classmethod
    def _numeric(cls, v):
        return _coerce_points(v)

    @field_validator("completion_time_minutes", mode="before")
    @classmethod
    def _minutes(cls, v):
        num = _coerce_points(v)
        return max(0, num) if num is not None else 0

    @field_validator("feedback", mode="before")
    @classmethod
    def _feedback_dict(cls, v):
        return v if isinstance(v, (dict, Feedback)) else None

    @field_validator("created_at", "submitted_at", mode="before")
    @classmethod
    def _timestamps(cls, v):
        return _coerce_datetime(v)

    @property
    def timestamp(self) -> Optional[datetime]:
        return self.created_at or self.submitted_at


class StudyTimeEntry(GardenModel):
    """One logged study session (or one day's total) for a student."""
    id: str = ""
    student_id: str
    logged_at: Optional[datetime] = Field(default=None, alias="date")
    minutes: Number = 0

    @model_validator(mode="before")
    @classmethod
    def _daily_totals(cls, data):
        # Daily roll-up documents store totalMinutes instead of minutes
        if isinstance(data, dict) and data.get("minutes") is None and "totalMinutes" in data:
            data = dict(data, minutes=data["totalMinutes"])
        return data

    @field_validator("minutes", mode="before")
    @classmethod
    def _minutes(cls, v):
        num = _coerce_points(v)
        return max(0, num) if num is not None else 0

    @field_validator("logged_at", mode="before")
    @classmethod
    def _timestamps(cls, v):
        return _coerce_datetime(v)


def parse_records(model, rows) -> list:
    """Validate raw store rows into ``model`` instances.

    Rows that fail validation are logged and skipped so one malformed
    document cannot take the whole aggregation down.
    """
    parsed = []
    for row in rows or []:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            row_id = row.get("id", "?") if isinstance(row, dict) else "?"
            logger.warning("Skipping invalid %s record %s: %d errors",
                           model.__name__, row_id, e.error_count())
    return parsed


# ═══════════════════════════════════════════════════════
# RESULTS
# ═══════════════════════════════════════════════════════

class StudentMetrics(GardenModel):
    id: str
    name: str
    completion_rate: int = 0
    stage: str = "seed"
    total_assignments: int = 0
    completed_assignments: int = 0
    total_points: int = 0
    earned_points: Number = 0
    is_own_child: Optional[bool] = None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RankingRow(GardenModel):
    student_id: str
    student_name: str
    subject: str
    rank: int = 0
    avg_score: int = 0
    total_score: Number = 0
    submissions: int = 0
    graded_submissions: int = 0


class SubjectComparison(GardenModel):
    subject: str
    child_avg: int = 0
    class_avg: int = 0


class WeeklyEngagement(GardenModel):
    student_id: str
    week_start: date
    minutes: int = 0
    recommended_minutes: int = 180
    source: str = "studyTime"


class RecentActivity(GardenModel):
    new_submissions: int = 0
    completed_assignments: int = 0
    average_study_time: int = 0


class ClassSummary(GardenModel):
    class_id: str
    class_name: str = ""
    total_students: int = 0
    average_completion_rate: int = 0
    total_assignments: int = 0
    completed_assignments: int = 0
    performance_distribution: Dict[str, int] = Field(default_factory=dict)
    recent_activity: RecentActivity = Field(default_factory=RecentActivity)
    last_updated: Optional[datetime] = None


class GardenView(GardenModel):
    class_summaries: List[ClassSummary] = Field(default_factory=list)
    own_children_data: List[StudentMetrics] = Field(default_factory=list)

    def to_json(self) -> dict:
        return {
            "classSummaries": [s.to_json() for s in self.class_summaries],
            "ownChildrenData": [c.to_json() for c in self.own_children_data],
        }
