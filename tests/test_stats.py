import unittest

from btp.schemas import EstimationResult
from btp.stats import compare_to_history, stats_by_type_df, summarize_history
from btp.store import sample_projects


def _result(duration: int) -> EstimationResult:
    return EstimationResult(
        total_cost=0,
        materials_cost_estimate=0,
        labor_cost_estimate=0,
        duration_estimate_days=duration,
        delay_risk_percent=0,
    )


class TestSummarizeHistory(unittest.TestCase):
    def test_empty_history(self):
        self.assertIsNone(summarize_history([]))

    def test_sample_totals(self):
        stats = summarize_history(sample_projects())
        self.assertEqual(stats.total_projects, 5)
        self.assertEqual(stats.total_investment, 540_000_000)
        # (90 + 180 + 240 + 120 + 150) / 5
        self.assertEqual(stats.average_duration_days, 156)
        # (5 + 15 + 20 + 8 + 12) / 5
        self.assertEqual(stats.average_delay_days, 12)

    def test_by_type_keeps_first_seen_order(self):
        stats = summarize_history(sample_projects())
        self.assertEqual(list(stats.by_type), ["résidentiel", "commercial", "industriel"])

        residential = stats.by_type["résidentiel"]
        self.assertEqual(residential.count, 2)
        self.assertEqual(residential.total_cost, 95_000_000)
        self.assertEqual(residential.average_duration_days, 105)
        self.assertEqual(residential.average_delay_days, 6.5)

    def test_by_type_frame(self):
        df = stats_by_type_df(summarize_history(sample_projects()))
        self.assertEqual(len(df), 3)
        self.assertEqual(df.loc[df["Type"] == "industriel", "count"].iloc[0], 1)


class TestCompareToHistory(unittest.TestCase):
    def test_longer_and_shorter(self):
        stats = summarize_history(sample_projects())

        longer = compare_to_history(_result(312), stats)
        self.assertEqual(longer["label"], "longer")
        self.assertAlmostEqual(longer["duration_ratio_pct"], 200.0)

        shorter = compare_to_history(_result(78), stats)
        self.assertEqual(shorter["label"], "shorter")
        self.assertAlmostEqual(shorter["duration_ratio_pct"], 50.0)


if __name__ == "__main__":
    unittest.main()
