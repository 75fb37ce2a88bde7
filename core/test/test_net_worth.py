from datetime import date, datetime

from django.test import SimpleTestCase

from core.academic.net_worth import (
    build_snapshot,
    calculate_growth,
    calculate_totals,
    days_between,
    find_previous_snapshot,
    summarize_history,
)
from core.services.shared.errors import InvalidLineItem


class NetWorthTotalsTests(SimpleTestCase):
    def test_totals_and_net_worth(self):
        totals = calculate_totals(
            {"cash_savings": 1200, "investments": 800.5},
            {"credit_card_debt": 300, "student_loans": 5000},
        )
        self.assertEqual(totals.total_assets, 2000.5)
        self.assertEqual(totals.total_liabilities, 5300)
        self.assertEqual(totals.net_worth, -3299.5)

    def test_missing_items_count_as_zero(self):
        totals = calculate_totals(None, {"car_loan": None})
        self.assertEqual(totals.total_assets, 0)
        self.assertEqual(totals.total_liabilities, 0)
        self.assertEqual(totals.net_worth, 0)

    def test_negative_line_item_rejected(self):
        with self.assertRaises(InvalidLineItem):
            calculate_totals({"cash_savings": -1}, {})

    def test_non_finite_line_item_rejected(self):
        for bad in ("nan", "inf", float("-inf")):
            with self.assertRaises(InvalidLineItem):
                calculate_totals({"cash_savings": bad}, {})
            with self.assertRaises(InvalidLineItem):
                build_snapshot(date(2026, 1, 1), {}, {"car_loan": bad})


class NetWorthGrowthTests(SimpleTestCase):
    def test_first_snapshot_has_no_growth(self):
        current = build_snapshot(date(2026, 1, 1), {"cash_savings": 100}, {})
        self.assertIsNone(calculate_growth(current, None))

    def test_growth_against_previous(self):
        prev = build_snapshot(date(2026, 1, 1), {"cash_savings": 1000}, {"car_loan": 200})
        cur = build_snapshot(date(2026, 1, 31), {"cash_savings": 1200}, {"car_loan": 200})
        growth = calculate_growth(cur, prev)
        self.assertEqual(growth.net_worth_change, 200)
        self.assertAlmostEqual(growth.percentage_change, 25.0)
        self.assertEqual(growth.days_elapsed, 30)

    def test_growth_from_negative_uses_absolute_base(self):
        prev = build_snapshot(date(2026, 1, 1), {}, {"student_loans": 1000})
        cur = build_snapshot(date(2026, 2, 1), {}, {"student_loans": 500})
        self.assertAlmostEqual(calculate_growth(cur, prev).percentage_change, 50.0)

    def test_zero_previous_net_worth_has_no_percentage(self):
        prev = build_snapshot(date(2026, 1, 1), {"cash_savings": 100}, {"car_loan": 100})
        cur = build_snapshot(date(2026, 1, 2), {"cash_savings": 300}, {"car_loan": 100})
        growth = calculate_growth(cur, prev)
        self.assertEqual(growth.net_worth_change, 200)
        self.assertIsNone(growth.percentage_change)
        self.assertIsNone(growth.to_dict()["percentage_change"])

    def test_days_elapsed_is_floored(self):
        self.assertEqual(days_between(datetime(2026, 1, 1, 12), datetime(2026, 1, 3, 11)), 1)

    def test_find_previous_snapshot_by_date(self):
        a = build_snapshot(date(2026, 1, 1), {"x": 1}, {})
        b = build_snapshot(date(2026, 2, 1), {"x": 2}, {})
        c = build_snapshot(date(2026, 3, 1), {"x": 3}, {})
        self.assertIs(find_previous_snapshot([c, a, b], c), b)
        self.assertIsNone(find_previous_snapshot([a, b, c], a))


class NetWorthSummaryTests(SimpleTestCase):
    def test_empty_history(self):
        self.assertIsNone(summarize_history([]))

    def test_summary(self):
        snaps = [
            build_snapshot(date(2026, 3, 1), {"cash_savings": 1500}, {}),
            build_snapshot(date(2026, 1, 1), {"cash_savings": 1000}, {}),
            build_snapshot(date(2026, 2, 1), {"cash_savings": 500}, {}),
        ]
        out = summarize_history(snaps)
        self.assertEqual(out["total_entries"], 3)
        self.assertEqual(out["current_net_worth"], 1500)
        self.assertEqual(out["total_change"], 500)
        self.assertEqual(out["percentage_change"], 50.0)
        self.assertEqual(out["average_net_worth"], 1000.0)
        self.assertEqual(out["highest_net_worth"], 1500)
        self.assertEqual(out["lowest_net_worth"], 500)
        self.assertEqual(out["asset_breakdown"], {"cash_savings": 1500.0})

    def test_summary_zero_first_net_worth(self):
        snaps = [
            build_snapshot(date(2026, 1, 1), {}, {}),
            build_snapshot(date(2026, 2, 1), {"cash_savings": 10}, {}),
        ]
        self.assertIsNone(summarize_history(snaps)["percentage_change"])
