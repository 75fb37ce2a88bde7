import json

from django.test import SimpleTestCase

from core.academic.grade_calculator import (
    Category,
    CategoryWeights,
    DEFAULT_CATEGORY_WEIGHTS,
    ScoredItem,
    calculate_class_average,
    calculate_weighted_grade,
    get_grade_letter,
    make_scored_item,
    summarize_categories,
)
from core.services.shared.errors import InvalidCategory, InvalidScore, InvalidWeights


class GradeCalculatorTests(SimpleTestCase):
    def test_get_grade_letter_boundaries(self):
        self.assertEqual(get_grade_letter(93.0), "A")
        self.assertEqual(get_grade_letter(92.99), "A-")
        self.assertEqual(get_grade_letter(90.0), "A-")
        self.assertEqual(get_grade_letter(89.99), "B+")
        self.assertEqual(get_grade_letter(60.0), "D-")
        self.assertEqual(get_grade_letter(59.99), "F")
        self.assertEqual(get_grade_letter(100), "A")
        self.assertEqual(get_grade_letter(0), "F")

    def test_get_grade_letter_middle_bands(self):
        self.assertEqual(get_grade_letter(87), "B+")
        self.assertEqual(get_grade_letter(85), "B")
        self.assertEqual(get_grade_letter(81), "B-")
        self.assertEqual(get_grade_letter(78), "C+")
        self.assertEqual(get_grade_letter(75), "C")
        self.assertEqual(get_grade_letter(70), "C-")
        self.assertEqual(get_grade_letter(68), "D+")
        self.assertEqual(get_grade_letter(65), "D")

    def test_weighted_grade_all_categories(self):
        items = [
            make_scored_item("Projects", 90, 100),
            make_scored_item("Quiz", 16, 20),
            make_scored_item("Participation", 10, 10),
            make_scored_item("RealWorld", 35, 50),
        ]
        report = calculate_weighted_grade(items, DEFAULT_CATEGORY_WEIGHTS)
        # (90*40 + 80*30 + 100*20 + 70*10) / 100
        self.assertAlmostEqual(report.weighted_grade, 87.0, places=6)
        self.assertEqual(report.letter_grade, "B+")
        self.assertAlmostEqual(report.categories[Category.QUIZ].percentage, 80.0)

    def test_weighted_grade_normalizes_by_present_categories(self):
        items = [make_scored_item("Projects", 80, 100), make_scored_item("Quiz", 30, 30)]
        report = calculate_weighted_grade(items, DEFAULT_CATEGORY_WEIGHTS)
        # (80*40 + 100*30) / 70
        self.assertAlmostEqual(report.weighted_grade, 6200 / 70, places=6)
        self.assertNotIn(Category.PARTICIPATION, report.categories)

    def test_items_in_same_category_are_pooled(self):
        items = [make_scored_item("Quiz", 5, 10), make_scored_item("Quiz", 10, 10)]
        totals = summarize_categories(items)
        self.assertEqual(totals[Category.QUIZ].earned, 15)
        self.assertEqual(totals[Category.QUIZ].possible, 20)
        self.assertAlmostEqual(totals[Category.QUIZ].percentage, 75.0)

    def test_no_items_gives_zero_not_error(self):
        report = calculate_weighted_grade([], DEFAULT_CATEGORY_WEIGHTS)
        self.assertEqual(report.weighted_grade, 0.0)
        self.assertEqual(report.letter_grade, "F")
        self.assertEqual(report.categories, {})

    def test_zero_possible_points_everywhere_gives_zero(self):
        items = [ScoredItem(category=Category.PROJECTS, earned_points=0, possible_points=0)]
        report = calculate_weighted_grade(items, DEFAULT_CATEGORY_WEIGHTS)
        self.assertEqual(report.weighted_grade, 0.0)
        self.assertEqual(report.categories[Category.PROJECTS].percentage, 0.0)

    def test_zero_weight_on_only_present_category(self):
        weights = CategoryWeights(projects=0, quiz=50, participation=25, real_world=25)
        report = calculate_weighted_grade([make_scored_item("Projects", 10, 10)], weights)
        self.assertEqual(report.weighted_grade, 0.0)

    def test_invalid_category_rejected(self):
        with self.assertRaises(InvalidCategory):
            make_scored_item("Quizzes", 1, 1)
        with self.assertRaises(InvalidCategory):
            make_scored_item("homework", 1, 1)

    def test_negative_points_rejected(self):
        with self.assertRaises(InvalidScore):
            make_scored_item("Quiz", -1, 10)
        with self.assertRaises(InvalidScore):
            make_scored_item("Quiz", 1, 0)
        with self.assertRaises(InvalidScore):
            calculate_weighted_grade(
                [ScoredItem(category=Category.QUIZ, earned_points=-2, possible_points=5)],
                DEFAULT_CATEGORY_WEIGHTS,
            )

    def test_weights_from_mapping_accepts_field_and_category_names(self):
        w1 = CategoryWeights.from_mapping({"projects": 40, "quizzes": 30, "participation": 20, "realWorld": 10})
        w2 = CategoryWeights.from_mapping({"Projects": 40, "Quiz": 30, "Participation": 20, "RealWorld": 10})
        self.assertEqual(w1, w2)
        self.assertEqual(w1, DEFAULT_CATEGORY_WEIGHTS)

    def test_weights_require_every_category(self):
        with self.assertRaises(InvalidWeights) as ctx:
            CategoryWeights.from_mapping({"projects": 50, "quiz": 50})
        self.assertIn("Participation", ctx.exception.details["missing"])

    def test_weights_reject_negative_and_unknown(self):
        with self.assertRaises(InvalidWeights):
            CategoryWeights(projects=-1, quiz=30, participation=20, real_world=10)
        with self.assertRaises(InvalidCategory):
            CategoryWeights.from_mapping({"homework": 10})

    def test_non_finite_points_and_weights_rejected(self):
        for bad in ("nan", "inf"):
            with self.assertRaises(InvalidScore):
                make_scored_item("Quiz", bad, 10)
            with self.assertRaises(InvalidScore):
                make_scored_item("Quiz", 5, bad)
            with self.assertRaises(InvalidWeights):
                CategoryWeights.from_mapping({"projects": bad, "quiz": 30, "participation": 20, "real_world": 10})
        with self.assertRaises(InvalidWeights):
            CategoryWeights(projects=float("inf"), quiz=30, participation=20, real_world=10)
        with self.assertRaises(InvalidScore):
            calculate_weighted_grade(
                [ScoredItem(category=Category.QUIZ, earned_points=float("nan"), possible_points=5)],
                DEFAULT_CATEGORY_WEIGHTS,
            )

    def test_class_average(self):
        a = calculate_weighted_grade([make_scored_item("Quiz", 9, 10)], DEFAULT_CATEGORY_WEIGHTS)
        b = calculate_weighted_grade([make_scored_item("Quiz", 7, 10)], DEFAULT_CATEGORY_WEIGHTS)
        self.assertAlmostEqual(calculate_class_average([a, b]), 80.0)
        self.assertEqual(calculate_class_average([]), 0.0)

    def test_report_json_round_trip_keeps_two_decimals(self):
        items = [make_scored_item("Projects", 2, 3), make_scored_item("Quiz", 7, 9)]
        report = calculate_weighted_grade(items, DEFAULT_CATEGORY_WEIGHTS)
        restored = json.loads(json.dumps(report.to_dict()))
        self.assertEqual(restored["weighted_grade"], round(report.weighted_grade, 2))
        self.assertEqual(restored["categories"]["Projects"]["percentage"], 66.67)
        self.assertEqual(restored["categories"]["Quiz"]["percentage"], 77.78)
        self.assertEqual(restored["letter_grade"], report.letter_grade)
