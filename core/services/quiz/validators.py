"""Quiz request validators."""

from __future__ import annotations

from typing import Any, Dict

from core.services.shared.errors import NotFoundError, PermissionDeniedError, ValidationError


def validate_attempt_ownership(*, attempt: Any, enrollment: Any) -> None:
    if attempt is None:
        raise NotFoundError("Quiz attempt not found.")
    if attempt.enrollment_id != enrollment.id:
        raise PermissionDeniedError("Not your quiz attempt.")


def validate_quiz_access(*, quiz: Any, enrollment: Any) -> None:
    if quiz is None:
        raise NotFoundError("Quiz not found.")
    if quiz.class_group_id != enrollment.class_group_id:
        raise PermissionDeniedError("Not enrolled in this class.")


def validate_answers_payload(answers: Any) -> Dict[str, Any]:
    if answers is None:
        return {}
    if not isinstance(answers, dict):
        raise ValidationError("answers must be an object keyed by question id.")
    return {str(k): v for k, v in answers.items()}
