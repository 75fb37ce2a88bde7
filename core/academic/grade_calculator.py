from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from core.services.shared.errors import InvalidCategory, InvalidScore, InvalidWeights


class Category(str, Enum):
    PROJECTS = "Projects"
    QUIZ = "Quiz"
    PARTICIPATION = "Participation"
    REAL_WORLD = "RealWorld"


# Evaluated top-down, first match wins.
LETTER_GRADE_THRESHOLDS: List[Tuple[float, str]] = [
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (67, "D+"),
    (63, "D"),
    (60, "D-"),
]
FAILING_LETTER = "F"


def parse_category(value: Any) -> Category:
    if isinstance(value, Category):
        return value
    try:
        return Category(str(value))
    except ValueError:
        raise InvalidCategory(f"Unknown grading category: {value!r}", category=str(value)) from None


@dataclass(frozen=True)
class ScoredItem:
    category: Category
    earned_points: float
    possible_points: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "earned_points": self.earned_points,
            "possible_points": self.possible_points,
        }


def make_scored_item(category: Any, earned_points: Any, possible_points: Any) -> ScoredItem:
    """Build a validated ScoredItem from raw input.

    Raises InvalidCategory for a name outside the closed enumeration and
    InvalidScore for negative or non-finite earned points and for
    non-positive possible points.
    """
    cat = parse_category(category)
    try:
        earned = float(earned_points)
        possible = float(possible_points)
    except (TypeError, ValueError):
        raise InvalidScore("Points must be numeric.") from None
    if not (math.isfinite(earned) and math.isfinite(possible)):
        raise InvalidScore("Points must be finite numbers.")
    if earned < 0:
        raise InvalidScore("Earned points cannot be negative.", earned_points=earned)
    if possible <= 0:
        raise InvalidScore("Possible points must be greater than zero.", possible_points=possible)
    return ScoredItem(category=cat, earned_points=earned, possible_points=possible)


@dataclass(frozen=True)
class CategoryWeights:
    projects: float
    quiz: float
    participation: float
    real_world: float

    def __post_init__(self) -> None:
        for name in ("projects", "quiz", "participation", "real_world"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidWeights(f"Weight '{name}' must be a number.", weight=name)
            if not math.isfinite(value):
                raise InvalidWeights(f"Weight '{name}' must be finite.", weight=name)
            if value < 0:
                raise InvalidWeights(f"Weight '{name}' cannot be negative.", weight=name)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "CategoryWeights":
        """Accept either category names ("Projects") or field names ("projects")."""
        values: Dict[Category, float] = {}
        for key, value in (raw or {}).items():
            cat = _weight_key_to_category(key)
            try:
                values[cat] = float(value)
            except (TypeError, ValueError):
                raise InvalidWeights(f"Weight for '{key}' must be a number.", weight=str(key)) from None
            if not math.isfinite(values[cat]):
                raise InvalidWeights(f"Weight for '{key}' must be finite.", weight=str(key))
        missing = [c.value for c in Category if c not in values]
        if missing:
            raise InvalidWeights(f"Missing weights: {', '.join(missing)}", missing=missing)
        return cls(
            projects=values[Category.PROJECTS],
            quiz=values[Category.QUIZ],
            participation=values[Category.PARTICIPATION],
            real_world=values[Category.REAL_WORLD],
        )

    def weight_for(self, category: Category) -> float:
        return {
            Category.PROJECTS: self.projects,
            Category.QUIZ: self.quiz,
            Category.PARTICIPATION: self.participation,
            Category.REAL_WORLD: self.real_world,
        }[category]

    def to_dict(self) -> Dict[str, float]:
        return {c.value: self.weight_for(c) for c in Category}


_FIELD_ALIASES = {
    "projects": Category.PROJECTS,
    "quiz": Category.QUIZ,
    "quizzes": Category.QUIZ,
    "participation": Category.PARTICIPATION,
    "real_world": Category.REAL_WORLD,
    "realworld": Category.REAL_WORLD,
}


def _weight_key_to_category(key: Any) -> Category:
    if isinstance(key, Category):
        return key
    alias = _FIELD_ALIASES.get(str(key).strip().lower())
    if alias is not None:
        return alias
    return parse_category(key)


DEFAULT_CATEGORY_WEIGHTS = CategoryWeights(projects=40, quiz=30, participation=20, real_world=10)


@dataclass(frozen=True)
class CategoryTotals:
    earned: float = 0.0
    possible: float = 0.0

    @property
    def percentage(self) -> float:
        return calculate_category_percentage(self.earned, self.possible)


@dataclass(frozen=True)
class CategoryResult:
    category: Category
    earned: float
    possible: float
    percentage: float
    weight: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "earned": round(self.earned, 2),
            "possible": round(self.possible, 2),
            "percentage": round(self.percentage, 2),
            "weight": self.weight,
        }


@dataclass(frozen=True)
class GradeReport:
    categories: Dict[Category, CategoryResult] = field(default_factory=dict)
    weighted_grade: float = 0.0
    letter_grade: str = FAILING_LETTER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": {c.value: r.to_dict() for c, r in self.categories.items()},
            "weighted_grade": round(self.weighted_grade, 2),
            "letter_grade": self.letter_grade,
        }


def calculate_category_percentage(earned: float, possible: float) -> float:
    if possible <= 0:
        return 0.0
    return 100.0 * earned / possible


def summarize_categories(items: Iterable[ScoredItem]) -> Dict[Category, CategoryTotals]:
    totals: Dict[Category, CategoryTotals] = {}
    for item in items or []:
        if not isinstance(item, ScoredItem):
            raise InvalidScore("Expected a ScoredItem.")
        if not (math.isfinite(item.earned_points) and math.isfinite(item.possible_points)):
            raise InvalidScore("Points must be finite numbers.")
        if item.earned_points < 0 or item.possible_points < 0:
            raise InvalidScore("Points cannot be negative.")
        prev = totals.get(item.category, CategoryTotals())
        totals[item.category] = CategoryTotals(
            earned=prev.earned + item.earned_points,
            possible=prev.possible + item.possible_points,
        )
    return totals


def get_grade_letter(percentage: float) -> str:
    s = float(percentage)
    for minimum, letter in LETTER_GRADE_THRESHOLDS:
        if s >= minimum:
            return letter
    return FAILING_LETTER


def calculate_weighted_grade(items: Iterable[ScoredItem], weights: CategoryWeights) -> GradeReport:
    """Combine category percentages into one weighted grade.

    Only categories with possible points recorded contribute their weight to
    the denominator, so an empty category neither helps nor hurts.
    """
    if not isinstance(weights, CategoryWeights):
        raise InvalidWeights("Expected CategoryWeights.")

    totals = summarize_categories(items)
    categories: Dict[Category, CategoryResult] = {}
    weighted_sum = 0.0
    weight_sum = 0.0
    for cat in Category:
        t = totals.get(cat)
        if t is None:
            continue
        weight = weights.weight_for(cat)
        pct = t.percentage
        categories[cat] = CategoryResult(
            category=cat, earned=t.earned, possible=t.possible, percentage=pct, weight=weight
        )
        if t.possible > 0:
            weighted_sum += pct * weight
            weight_sum += weight

    grade = weighted_sum / weight_sum if weight_sum > 0 else 0.0
    return GradeReport(categories=categories, weighted_grade=grade, letter_grade=get_grade_letter(grade))


def calculate_class_average(reports: Iterable[GradeReport]) -> float:
    grades = [r.weighted_grade for r in reports or []]
    if not grades:
        return 0.0
    return sum(grades) / len(grades)
