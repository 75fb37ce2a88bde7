from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from core.academic.grade_calculator import (
    DEFAULT_CATEGORY_WEIGHTS,
    CategoryWeights,
    GradeReport,
    ScoredItem,
    calculate_class_average,
    calculate_weighted_grade,
    make_scored_item,
)
from core.models import ClassGroup, Course, Enrollment, Grade
from core.services.shared.dto import ClassSummaryPayload, StudentGradePayload

logger = logging.getLogger(__name__)


def create_class_group(
    course: Course,
    instructor,
    name: str,
    weights: Optional[CategoryWeights | Mapping[str, Any]] = None,
    school_year: str = "",
) -> ClassGroup:
    """Create a class with every category weight written out.

    Without explicit weights the class gets DEFAULT_CATEGORY_WEIGHTS.
    """
    if weights is None:
        weights = DEFAULT_CATEGORY_WEIGHTS
    elif not isinstance(weights, CategoryWeights):
        weights = CategoryWeights.from_mapping(weights)
    class_group = ClassGroup.objects.create(
        course=course,
        instructor=instructor,
        name=name,
        school_year=school_year or "",
        weight_projects=weights.projects,
        weight_quiz=weights.quiz,
        weight_participation=weights.participation,
        weight_real_world=weights.real_world,
    )
    logger.info("class_group_created class_id=%s weights=%s", class_group.id, weights.to_dict())
    return class_group


def _scored_items_for(enrollment: Enrollment) -> List[ScoredItem]:
    rows = Grade.objects.filter(enrollment=enrollment).only("category", "earned_points", "possible_points")
    return [make_scored_item(g.category, g.earned_points, g.possible_points) for g in rows]


def record_grade(enrollment: Enrollment, category: Any, earned_points: Any, possible_points: Any, quiz=None) -> Grade:
    item = make_scored_item(category, earned_points, possible_points)
    grade = Grade.objects.create(
        enrollment=enrollment,
        category=item.category.value,
        earned_points=item.earned_points,
        possible_points=item.possible_points,
        quiz=quiz,
    )
    logger.info(
        "grade_recorded enrollment_id=%s category=%s earned=%s possible=%s",
        enrollment.id,
        item.category.value,
        item.earned_points,
        item.possible_points,
    )
    return grade


def record_scored_item(enrollment: Enrollment, item: ScoredItem, quiz=None) -> Grade:
    return record_grade(enrollment, item.category, item.earned_points, item.possible_points, quiz=quiz)


def get_enrollment_report(enrollment: Enrollment) -> GradeReport:
    weights = enrollment.class_group.get_category_weights()
    return calculate_weighted_grade(_scored_items_for(enrollment), weights)


def _student_payload(enrollment: Enrollment, report: GradeReport) -> StudentGradePayload:
    data = report.to_dict()
    return {
        "enrollment_id": enrollment.id,
        "student": enrollment.student.username,
        "weighted_grade": data["weighted_grade"],
        "letter_grade": data["letter_grade"],
        "categories": data["categories"],
    }


def get_enrollment_grade(enrollment: Enrollment) -> StudentGradePayload:
    return _student_payload(enrollment, get_enrollment_report(enrollment))


def get_class_summary(class_group: ClassGroup) -> ClassSummaryPayload:
    enrollments = list(
        Enrollment.objects.filter(class_group=class_group).select_related("student", "class_group").order_by("id")
    )
    weights = class_group.get_category_weights()
    reports = [calculate_weighted_grade(_scored_items_for(e), weights) for e in enrollments]
    students = [_student_payload(e, r) for e, r in zip(enrollments, reports)]
    return {
        "class_id": class_group.id,
        "class_name": class_group.name,
        "course_name": class_group.course.name,
        "weights": weights.to_dict(),
        "student_count": len(enrollments),
        "average_grade": round(calculate_class_average(reports), 2),
        "students": students,
    }
