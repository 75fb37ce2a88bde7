"""Quiz attempt state-machine primitives."""

from __future__ import annotations

from typing import Any

from core.academic.quiz_grader import Quiz as QuizDef
from core.academic.quiz_grader import QuizAttempt as AttemptValue

STATE_STARTED = "started"
STATE_SUBMITTED = "submitted"


def get_attempt_state(attempt: Any) -> str:
    return STATE_SUBMITTED if getattr(attempt, "submitted_at", None) else STATE_STARTED


def to_quiz_definition(quiz: Any) -> QuizDef:
    return QuizDef.from_definition(
        quiz.questions or [],
        time_limit_minutes=quiz.time_limit_minutes,
        attempts_allowed=quiz.attempts_allowed,
        quiz_id=quiz.id,
    )


def to_attempt_value(attempt: Any) -> AttemptValue:
    return AttemptValue(
        quiz_id=str(attempt.quiz_id),
        attempt_number=int(attempt.attempt_number),
        started_at=attempt.started_at,
        submitted_at=attempt.submitted_at,
        answers=dict(attempt.answers or {}),
        earned_points=float(attempt.earned_points or 0.0),
        score=float(attempt.score or 0.0),
    )


def apply_submission(attempt: Any, submitted: AttemptValue, graded_answers: dict) -> list[str]:
    """Copy a graded attempt value onto the ORM row; returns the fields to save."""
    attempt.submitted_at = submitted.submitted_at
    attempt.answers = graded_answers
    attempt.earned_points = submitted.earned_points
    attempt.score = submitted.score
    return ["submitted_at", "answers", "earned_points", "score"]
