"""Quiz auto-grading and the attempt lifecycle.

An attempt moves Started -> Submitted exactly once. Functions here never
mutate their inputs: `submit_attempt` returns a new attempt value and the
caller persists it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from core.services.shared.errors import (
    AlreadySubmitted,
    AnswerTypeMismatch,
    AttemptLimitExceeded,
    InvalidQuizDefinition,
    TimeLimitExceeded,
)

from .grade_calculator import Category, ScoredItem


class QuestionType(str, Enum):
    SINGLE_CHOICE = "SingleChoice"
    TRUE_FALSE = "TrueFalse"
    MULTIPLE_SELECT = "MultipleSelect"


# Stored definitions from older content use "MultipleChoice" for single choice.
_TYPE_ALIASES = {"MultipleChoice": QuestionType.SINGLE_CHOICE}

CorrectAnswer = Union[str, FrozenSet[str]]


@dataclass(frozen=True)
class Question:
    id: str
    type: QuestionType
    correct_answer: CorrectAnswer
    points: float
    options: Tuple[str, ...] = ()
    text: str = ""
    explanation: str = ""

    @classmethod
    def from_definition(cls, raw: Mapping[str, Any]) -> "Question":
        if not isinstance(raw, Mapping):
            raise InvalidQuizDefinition("Question definition must be an object.")
        qid = str(raw.get("id") or "").strip()
        if not qid:
            raise InvalidQuizDefinition("Question id is required.")

        raw_type = str(raw.get("type") or raw.get("questionType") or "")
        try:
            qtype = _TYPE_ALIASES.get(raw_type) or QuestionType(raw_type)
        except ValueError:
            raise InvalidQuizDefinition(f"Unknown question type: {raw_type!r}", question_id=qid) from None

        try:
            points = float(raw.get("points", 0))
        except (TypeError, ValueError):
            raise InvalidQuizDefinition("Question points must be numeric.", question_id=qid) from None
        if points <= 0:
            raise InvalidQuizDefinition("Question points must be greater than zero.", question_id=qid)

        correct = raw.get("correct_answer", raw.get("correctAnswer"))
        if qtype is QuestionType.MULTIPLE_SELECT:
            if isinstance(correct, str) or not isinstance(correct, (list, tuple, set, frozenset)):
                raise InvalidQuizDefinition("MultipleSelect correct answer must be a list.", question_id=qid)
            correct_value: CorrectAnswer = frozenset(str(c) for c in correct)
        else:
            if not isinstance(correct, str):
                raise InvalidQuizDefinition(f"{qtype.value} correct answer must be a string.", question_id=qid)
            correct_value = correct

        options = tuple(str(o) for o in (raw.get("options") or []))
        text = str(raw.get("text") or raw.get("questionText") or "")
        explanation = str(raw.get("explanation") or "")
        return cls(
            id=qid,
            type=qtype,
            correct_answer=correct_value,
            points=points,
            options=options,
            text=text,
            explanation=explanation,
        )

    def correct_answer_for_display(self) -> Union[str, List[str]]:
        if isinstance(self.correct_answer, frozenset):
            return sorted(self.correct_answer)
        return self.correct_answer


@dataclass(frozen=True)
class Quiz:
    questions: Tuple[Question, ...]
    time_limit_minutes: Optional[float] = None
    attempts_allowed: Optional[int] = None
    id: str = ""

    def __post_init__(self) -> None:
        seen = set()
        for q in self.questions:
            if q.id in seen:
                raise InvalidQuizDefinition(f"Duplicate question id: {q.id}", question_id=q.id)
            seen.add(q.id)

    @property
    def total_points(self) -> float:
        return sum(q.points for q in self.questions)

    @classmethod
    def from_definition(
        cls,
        questions: Iterable[Mapping[str, Any]],
        *,
        time_limit_minutes: Optional[float] = None,
        attempts_allowed: Optional[int] = None,
        quiz_id: Any = "",
    ) -> "Quiz":
        return cls(
            questions=tuple(Question.from_definition(q) for q in (questions or [])),
            time_limit_minutes=time_limit_minutes or None,
            attempts_allowed=attempts_allowed or None,
            id=str(quiz_id or ""),
        )


@dataclass(frozen=True)
class QuestionResult:
    question_id: str
    student_answer: Any
    correct_answer: Union[str, List[str]]
    is_correct: bool
    points_earned: float
    possible_points: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "student_answer": self.student_answer,
            "correct_answer": self.correct_answer,
            "is_correct": self.is_correct,
            "points_earned": self.points_earned,
            "possible_points": self.possible_points,
        }


@dataclass(frozen=True)
class QuizAttempt:
    quiz_id: str
    attempt_number: int
    started_at: datetime
    submitted_at: Optional[datetime] = None
    answers: Dict[str, Any] = field(default_factory=dict)
    earned_points: float = 0.0
    score: float = 0.0

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None


@dataclass(frozen=True)
class SubmissionResult:
    attempt: QuizAttempt
    results: Dict[str, QuestionResult]
    earned_points: float
    possible_points: float
    score: float
    scored_item: ScoredItem

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": round(self.score, 2),
            "earned_points": self.earned_points,
            "possible_points": self.possible_points,
            "attempt_number": self.attempt.attempt_number,
            "graded_answers": {qid: r.to_dict() for qid, r in self.results.items()},
        }


def _as_answer_set(question: Question, answer: Any) -> FrozenSet[str]:
    if isinstance(answer, str) or not isinstance(answer, (list, tuple, set, frozenset)):
        raise AnswerTypeMismatch(
            f"Question {question.id} expects a list of selections.", question_id=question.id
        )
    return frozenset(str(a) for a in answer)


def grade_question(question: Question, answer: Any) -> QuestionResult:
    if answer is None:
        is_correct = False
    elif question.type is QuestionType.MULTIPLE_SELECT:
        is_correct = _as_answer_set(question, answer) == question.correct_answer
    else:
        if not isinstance(answer, str):
            raise AnswerTypeMismatch(
                f"Question {question.id} expects a single answer.", question_id=question.id
            )
        is_correct = answer == question.correct_answer

    return QuestionResult(
        question_id=question.id,
        student_answer=answer,
        correct_answer=question.correct_answer_for_display(),
        is_correct=is_correct,
        points_earned=question.points if is_correct else 0.0,
        possible_points=question.points,
    )


def start_attempt(quiz: Quiz, prior_attempts: int, now: datetime) -> QuizAttempt:
    prior = int(prior_attempts or 0)
    if quiz.attempts_allowed and prior >= quiz.attempts_allowed:
        raise AttemptLimitExceeded(attempts_allowed=quiz.attempts_allowed)
    return QuizAttempt(quiz_id=quiz.id, attempt_number=prior + 1, started_at=now)


def elapsed_minutes(started_at: datetime, now: datetime) -> float:
    return (now - started_at).total_seconds() / 60.0


def submit_attempt(quiz: Quiz, attempt: QuizAttempt, answers: Mapping[str, Any], now: datetime) -> SubmissionResult:
    if attempt.is_submitted:
        raise AlreadySubmitted(attempt_number=attempt.attempt_number)
    if quiz.time_limit_minutes and elapsed_minutes(attempt.started_at, now) > quiz.time_limit_minutes:
        raise TimeLimitExceeded(time_limit=quiz.time_limit_minutes)

    answers = dict(answers or {})
    results: Dict[str, QuestionResult] = {}
    earned = 0.0
    for question in quiz.questions:
        result = grade_question(question, answers.get(question.id))
        results[question.id] = result
        earned += result.points_earned

    total = quiz.total_points
    score = 100.0 * earned / total if total > 0 else 0.0
    submitted = replace(attempt, submitted_at=now, answers=answers, earned_points=earned, score=score)
    return SubmissionResult(
        attempt=submitted,
        results=results,
        earned_points=earned,
        possible_points=total,
        score=score,
        scored_item=ScoredItem(category=Category.QUIZ, earned_points=earned, possible_points=total),
    )


def best_score(attempts: Iterable[QuizAttempt]) -> Optional[float]:
    scores = [a.score for a in attempts or [] if a.is_submitted]
    return max(scores) if scores else None


def redact_questions(quiz: Quiz) -> List[Dict[str, Any]]:
    return [
        {"id": q.id, "text": q.text, "type": q.type.value, "options": list(q.options), "points": q.points}
        for q in quiz.questions
    ]


def build_review(quiz: Quiz, graded_answers: Mapping[str, Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Pair each question with its stored grading record for post-submission review.

    Unlike `redact_questions`, the output carries correct answers and explanations,
    so it is only for attempts that have been submitted.
    """
    review = []
    for q in quiz.questions:
        graded = graded_answers.get(q.id) or {}
        review.append(
            {
                "id": q.id,
                "text": q.text,
                "type": q.type.value,
                "options": list(q.options),
                "points": q.points,
                "student_answer": graded.get("student_answer"),
                "correct_answer": q.correct_answer_for_display(),
                "is_correct": bool(graded.get("is_correct", False)),
                "points_earned": graded.get("points_earned", 0.0),
                "explanation": q.explanation,
            }
        )
    return review
