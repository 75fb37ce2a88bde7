from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.services.shared.errors import AllocationMismatch, InvalidAllocation, InvalidIncome

from .settings import get_grading_settings

BUCKETS = ("needs", "savings", "wants")
RECOMMENDED_PERCENTAGES: Dict[str, int] = {"needs": 50, "savings": 20, "wants": 30}

SAVINGS_GAP_PCT = 5.0
OVERSPEND_PCT = 10.0


@dataclass(frozen=True)
class Allocation:
    needs: float
    wants: float
    savings: float

    @property
    def total(self) -> float:
        return self.needs + self.wants + self.savings

    def to_dict(self) -> Dict[str, float]:
        return {"needs": self.needs, "savings": self.savings, "wants": self.wants}


@dataclass(frozen=True)
class FeedbackItem:
    type: str
    message: str
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        out = {"type": self.type, "message": self.message}
        if self.category:
            out["category"] = self.category
        return out


@dataclass(frozen=True)
class BudgetAnalysis:
    monthly_income: float
    allocation: Allocation
    recommended: Allocation
    variance: Allocation
    feedback: List[FeedbackItem]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "monthly_income": self.monthly_income,
            "allocation": self.allocation.to_dict(),
            "recommended": self.recommended.to_dict(),
            "variance": self.variance.to_dict(),
            "feedback": [f.to_dict() for f in self.feedback],
        }


def _require_income(monthly_income: Any) -> float:
    try:
        income = float(monthly_income)
    except (TypeError, ValueError):
        raise InvalidIncome() from None
    if not math.isfinite(income) or income <= 0:
        raise InvalidIncome(monthly_income=monthly_income)
    return income


def validate_allocation(monthly_income: Any, needs: Any, wants: Any, savings: Any) -> Allocation:
    income = _require_income(monthly_income)
    try:
        allocation = Allocation(needs=float(needs), wants=float(wants), savings=float(savings))
    except (TypeError, ValueError):
        raise InvalidAllocation("Budget buckets must be numeric.") from None
    buckets = (allocation.needs, allocation.wants, allocation.savings)
    if not all(math.isfinite(v) for v in buckets):
        raise InvalidAllocation("Budget buckets must be finite numbers.")
    if min(buckets) < 0:
        raise InvalidAllocation()

    tolerance = get_grading_settings().budget_tolerance
    if not abs(allocation.total - income) <= tolerance:
        raise AllocationMismatch(total_allocated=allocation.total, monthly_income=income)
    return allocation


def recommend_allocation(monthly_income: Any) -> Allocation:
    income = _require_income(monthly_income)
    return Allocation(needs=income * 0.50, savings=income * 0.20, wants=income * 0.30)


def calculate_variance(actual: Allocation, recommended: Allocation) -> Allocation:
    return Allocation(
        needs=actual.needs - recommended.needs,
        wants=actual.wants - recommended.wants,
        savings=actual.savings - recommended.savings,
    )


def generate_feedback(variance: Allocation, monthly_income: float) -> List[FeedbackItem]:
    needs_pct = variance.needs / monthly_income * 100
    savings_pct = variance.savings / monthly_income * 100
    wants_pct = variance.wants / monthly_income * 100

    close = get_grading_settings().budget_close_pct
    if abs(needs_pct) < close and abs(savings_pct) < close and abs(wants_pct) < close:
        return [FeedbackItem(type="success", message="Excellent! Your budget follows the 50/20/30 rule closely.")]

    feedback: List[FeedbackItem] = []
    if savings_pct < -SAVINGS_GAP_PCT:
        feedback.append(
            FeedbackItem(
                type="warning",
                category="savings",
                message=(
                    f"You're saving {abs(savings_pct):.1f}% less than recommended. "
                    "Consider increasing your savings to 20% of income."
                ),
            )
        )
    elif savings_pct > SAVINGS_GAP_PCT:
        feedback.append(
            FeedbackItem(
                type="success",
                category="savings",
                message=f"Great job! You're saving {savings_pct:.1f}% more than the recommended 20%.",
            )
        )

    if needs_pct > OVERSPEND_PCT:
        feedback.append(
            FeedbackItem(
                type="warning",
                category="needs",
                message=(
                    f"Your needs are {needs_pct:.1f}% higher than recommended. "
                    "Look for ways to reduce essential expenses."
                ),
            )
        )

    if wants_pct > OVERSPEND_PCT:
        feedback.append(
            FeedbackItem(
                type="info",
                category="wants",
                message=(
                    f"Your wants are {wants_pct:.1f}% higher than recommended. "
                    "Consider cutting back on discretionary spending."
                ),
            )
        )
    return feedback


def analyze_budget(monthly_income: Any, needs: Any, wants: Any, savings: Any) -> BudgetAnalysis:
    allocation = validate_allocation(monthly_income, needs, wants, savings)
    income = float(monthly_income)
    recommended = recommend_allocation(income)
    variance = calculate_variance(allocation, recommended)
    return BudgetAnalysis(
        monthly_income=income,
        allocation=allocation,
        recommended=recommended,
        variance=variance,
        feedback=generate_feedback(variance, income),
    )
