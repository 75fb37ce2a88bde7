from __future__ import annotations

from typing import Any, Dict, List, Optional, TypedDict


class GrowthPayload(TypedDict):
    net_worth_change: float
    percentage_change: Optional[float]
    days_elapsed: int


class SnapshotPayload(TypedDict):
    id: int
    record_date: str
    assets: Dict[str, float]
    liabilities: Dict[str, float]
    total_assets: float
    total_liabilities: float
    net_worth: float
    is_hypothetical: bool


class AttemptPayload(TypedDict):
    id: int
    attempt_number: int
    score: Optional[float]
    earned_points: Optional[float]
    possible_points: float
    started_at: str
    submitted_at: Optional[str]


class StudentGradePayload(TypedDict):
    enrollment_id: int
    student: str
    weighted_grade: float
    letter_grade: str
    categories: Dict[str, Dict[str, Any]]


class ClassSummaryPayload(TypedDict):
    class_id: int
    class_name: str
    course_name: str
    weights: Dict[str, float]
    student_count: int
    average_grade: float
    students: List[StudentGradePayload]
