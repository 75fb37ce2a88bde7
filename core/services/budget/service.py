from __future__ import annotations

import logging
from typing import Any, Dict, List

from core.academic.budget import RECOMMENDED_PERCENTAGES, analyze_budget, recommend_allocation
from core.models import BudgetEntry, Enrollment
from core.services.shared.errors import AllocationMismatch, NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


def serialize_budget_entry(entry: BudgetEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "monthly_income": entry.monthly_income,
        "needs": entry.needs,
        "wants": entry.wants,
        "savings": entry.savings,
        "scenario_name": entry.scenario_name,
        "notes": entry.notes,
        "is_hypothetical": entry.is_hypothetical,
        "created_at": entry.created_at.strftime("%Y-%m-%d %H:%M"),
    }


def calculate_recommendation(monthly_income: Any) -> Dict[str, Any]:
    recommended = recommend_allocation(monthly_income)
    return {
        "monthly_income": float(monthly_income),
        "recommended": recommended.to_dict(),
        "percentages": dict(RECOMMENDED_PERCENTAGES),
    }


def create_budget_entry(
    enrollment: Enrollment,
    *,
    monthly_income: Any,
    needs: Any,
    wants: Any,
    savings: Any,
    scenario_name: str = "",
    notes: str = "",
    is_hypothetical: bool = False,
) -> Dict[str, Any]:
    try:
        analysis = analyze_budget(monthly_income, needs, wants, savings)
    except AllocationMismatch as exc:
        logger.warning(
            "budget_allocation_mismatch enrollment_id=%s total=%s income=%s",
            enrollment.id,
            exc.total_allocated,
            exc.monthly_income,
        )
        raise

    entry = BudgetEntry.objects.create(
        enrollment=enrollment,
        monthly_income=analysis.monthly_income,
        needs=analysis.allocation.needs,
        wants=analysis.allocation.wants,
        savings=analysis.allocation.savings,
        scenario_name=scenario_name or "",
        notes=notes or "",
        is_hypothetical=bool(is_hypothetical),
    )
    logger.info("budget_created enrollment_id=%s entry_id=%s feedback=%s", enrollment.id, entry.id, len(analysis.feedback))

    data = analysis.to_dict()
    return {
        "budget": serialize_budget_entry(entry),
        "recommended": data["recommended"],
        "variance": data["variance"],
        "feedback": data["feedback"],
    }


def list_budget_entries(enrollment: Enrollment) -> List[Dict[str, Any]]:
    return [serialize_budget_entry(e) for e in BudgetEntry.objects.filter(enrollment=enrollment)]


def _owned_entry(entry_id: int, enrollment: Enrollment) -> BudgetEntry:
    entry = BudgetEntry.objects.filter(id=entry_id).first()
    if entry is None:
        raise NotFoundError("Budget entry not found.")
    if entry.enrollment_id != enrollment.id:
        raise PermissionDeniedError("Not your budget entry.")
    return entry


def get_budget_entry(entry_id: int, enrollment: Enrollment) -> Dict[str, Any]:
    entry = _owned_entry(entry_id, enrollment)
    analysis = analyze_budget(entry.monthly_income, entry.needs, entry.wants, entry.savings)
    data = analysis.to_dict()
    return {
        "budget": serialize_budget_entry(entry),
        "recommended": data["recommended"],
        "variance": data["variance"],
        "feedback": data["feedback"],
    }


def delete_budget_entry(entry_id: int, enrollment: Enrollment) -> None:
    entry = _owned_entry(entry_id, enrollment)
    entry.delete()
    logger.info("budget_deleted enrollment_id=%s entry_id=%s", enrollment.id, entry_id)
