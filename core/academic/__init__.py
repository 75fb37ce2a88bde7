"""Academic domain modules for grading, quizzes, budgeting and net worth."""

from .budget import analyze_budget, recommend_allocation, validate_allocation
from .grade_calculator import (
    Category,
    CategoryWeights,
    DEFAULT_CATEGORY_WEIGHTS,
    ScoredItem,
    calculate_weighted_grade,
    get_grade_letter,
    make_scored_item,
)
from .net_worth import build_snapshot, calculate_growth, summarize_history
from .quiz_grader import Question, QuestionType, Quiz, QuizAttempt, start_attempt, submit_attempt

__all__ = [
    "Category",
    "CategoryWeights",
    "DEFAULT_CATEGORY_WEIGHTS",
    "ScoredItem",
    "calculate_weighted_grade",
    "get_grade_letter",
    "make_scored_item",
    "Question",
    "QuestionType",
    "Quiz",
    "QuizAttempt",
    "start_attempt",
    "submit_attempt",
    "analyze_budget",
    "recommend_allocation",
    "validate_allocation",
    "build_snapshot",
    "calculate_growth",
    "summarize_history",
]
