from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.academic.quiz_grader import best_score, build_review, redact_questions, start_attempt, submit_attempt
from core.academic.settings import get_grading_settings
from core.models import Enrollment, Quiz, QuizAttempt
from core.services.gradebook.service import record_scored_item
from core.services.quiz import state_machine as sm
from core.services.quiz import validators as vz
from core.services.shared.dto import AttemptPayload
from core.services.shared.errors import AttemptConflict, AttemptNotSubmitted, StateError

logger = logging.getLogger(__name__)


def _iso(dt) -> Optional[str]:
    return dt.isoformat() if dt is not None else None


def serialize_attempt(attempt: QuizAttempt) -> AttemptPayload:
    return {
        "id": attempt.id,
        "attempt_number": attempt.attempt_number,
        "score": attempt.score,
        "earned_points": attempt.earned_points,
        "possible_points": attempt.possible_points,
        "started_at": attempt.started_at.isoformat(),
        "submitted_at": _iso(attempt.submitted_at),
    }


def start_quiz(enrollment: Enrollment, quiz: Quiz, now: datetime | None = None) -> Dict[str, Any]:
    vz.validate_quiz_access(quiz=quiz, enrollment=enrollment)
    quiz_def = sm.to_quiz_definition(quiz)
    now = now or timezone.now()

    with transaction.atomic():
        prior = QuizAttempt.objects.filter(enrollment=enrollment, quiz=quiz).count()
        try:
            value = start_attempt(quiz_def, prior, now)
        except StateError as exc:
            logger.warning(
                "quiz_start_rejected enrollment_id=%s quiz_id=%s code=%s", enrollment.id, quiz.id, exc.error_code
            )
            raise
        try:
            with transaction.atomic():
                attempt = QuizAttempt.objects.create(
                    enrollment=enrollment,
                    quiz=quiz,
                    attempt_number=value.attempt_number,
                    started_at=value.started_at,
                    possible_points=quiz_def.total_points,
                )
        except IntegrityError:
            # A concurrent start took this attempt number first.
            logger.warning(
                "quiz_start_conflict enrollment_id=%s quiz_id=%s attempt_number=%s",
                enrollment.id,
                quiz.id,
                value.attempt_number,
            )
            raise AttemptConflict(attempt_number=value.attempt_number) from None

    logger.info(
        "quiz_started enrollment_id=%s quiz_id=%s attempt_id=%s attempt_number=%s",
        enrollment.id,
        quiz.id,
        attempt.id,
        attempt.attempt_number,
    )
    return {
        "attempt_id": attempt.id,
        "attempt_number": attempt.attempt_number,
        "time_limit_minutes": quiz.time_limit_minutes,
    }


def submit_quiz(
    attempt_id: int,
    enrollment: Enrollment,
    answers: Any,
    now: datetime | None = None,
) -> Dict[str, Any]:
    answers = vz.validate_answers_payload(answers)
    now = now or timezone.now()

    with transaction.atomic():
        attempt = QuizAttempt.objects.select_for_update().select_related("quiz").filter(id=attempt_id).first()
        vz.validate_attempt_ownership(attempt=attempt, enrollment=enrollment)
        quiz_def = sm.to_quiz_definition(attempt.quiz)
        try:
            result = submit_attempt(quiz_def, sm.to_attempt_value(attempt), answers, now)
        except StateError as exc:
            logger.warning("quiz_submit_rejected attempt_id=%s code=%s", attempt.id, exc.error_code)
            raise

        graded = {qid: r.to_dict() for qid, r in result.results.items()}
        fields = sm.apply_submission(attempt, result.attempt, graded)
        attempt.save(update_fields=fields)
        if result.possible_points > 0:
            record_scored_item(enrollment, result.scored_item, quiz=attempt.quiz)

    logger.info(
        "quiz_submitted attempt_id=%s earned=%s possible=%s score=%.2f",
        attempt.id,
        result.earned_points,
        result.possible_points,
        result.score,
    )
    payload = result.to_dict()
    payload["attempt_id"] = attempt.id
    return payload


def get_quiz_overview(enrollment: Enrollment, quiz: Quiz) -> Dict[str, Any]:
    vz.validate_quiz_access(quiz=quiz, enrollment=enrollment)
    quiz_def = sm.to_quiz_definition(quiz)
    rows: List[QuizAttempt] = list(QuizAttempt.objects.filter(enrollment=enrollment, quiz=quiz).order_by("-attempt_number"))
    limit = get_grading_settings().recent_attempts
    return {
        "quiz": {
            "id": quiz.id,
            "title": quiz.title,
            "description": quiz.description,
            "time_limit_minutes": quiz.time_limit_minutes,
            "attempts_allowed": quiz.attempts_allowed,
            "total_points": quiz_def.total_points,
            "questions": redact_questions(quiz_def),
        },
        "attempts": len(rows),
        "best_score": best_score(sm.to_attempt_value(r) for r in rows),
        "recent_attempts": [serialize_attempt(r) for r in rows[:limit]],
    }


def get_attempt_review(attempt_id: int, enrollment: Enrollment) -> Dict[str, Any]:
    attempt = QuizAttempt.objects.select_related("quiz").filter(id=attempt_id).first()
    vz.validate_attempt_ownership(attempt=attempt, enrollment=enrollment)
    if sm.get_attempt_state(attempt) != sm.STATE_SUBMITTED:
        raise AttemptNotSubmitted(attempt_id=attempt.id)

    quiz = attempt.quiz
    quiz_def = sm.to_quiz_definition(quiz)
    return {
        "attempt": serialize_attempt(attempt),
        "quiz": {"id": quiz.id, "title": quiz.title, "description": quiz.description},
        "questions": build_review(quiz_def, attempt.answers or {}),
    }
