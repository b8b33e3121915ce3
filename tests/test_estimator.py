import unittest
import warnings

from btp.config import (
    REC_FALLBACK,
    REC_HEAT,
    REC_LARGE_SURFACE,
    REC_LONG_PROJECT,
    REC_RAIN,
    REC_RISK_MARGIN,
    REC_SMALL_CREW,
)
from btp.errors import DegenerateInputWarning, ErrorCode, InsufficientDataError
from btp.estimator import _safe_ratio, _whole, estimate, rain_factor, temperature_factor
from btp.schemas import EstimationRequest, EstimatorOptions, HistoricalProject
from btp.store import sample_projects


def _three_projects():
    return [
        HistoricalProject(
            project_type="résidentiel",
            surface_area=150,
            worker_count=8,
            average_temperature=28,
            rain_days=5,
            materials_cost=25_000_000,
            labor_cost=15_000_000,
            estimated_duration_days=90,
            delay_days=5,
        ),
        HistoricalProject(
            project_type="commercial",
            surface_area=500,
            worker_count=15,
            average_temperature=30,
            rain_days=10,
            materials_cost=80_000_000,
            labor_cost=45_000_000,
            estimated_duration_days=180,
            delay_days=15,
        ),
        HistoricalProject(
            project_type="industriel",
            surface_area=1000,
            worker_count=25,
            average_temperature=32,
            rain_days=8,
            materials_cost=150_000_000,
            labor_cost=80_000_000,
            estimated_duration_days=240,
            delay_days=20,
        ),
    ]


def _quiet_estimate(request, historical, options=None):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", DegenerateInputWarning)
        return estimate(request, historical, options)


class TestEstimateSimilar(unittest.TestCase):
    def test_single_matching_project_scales_by_surface(self):
        request = EstimationRequest(
            project_type="résidentiel",
            surface_area=200,
            worker_count=10,
            average_temperature=26,
            rain_days=3,
        )
        result = _quiet_estimate(request, _three_projects())

        self.assertFalse(result.fallback)
        self.assertEqual(result.sample_size, 1)
        self.assertAlmostEqual(result.materials_cost_estimate, 33_333_333, delta=1)
        self.assertAlmostEqual(result.labor_cost_estimate, 20_000_000, delta=1)
        self.assertEqual(
            result.total_cost,
            result.materials_cost_estimate + result.labor_cost_estimate,
        )
        self.assertEqual(result.duration_estimate_days, 120)
        # 3/10 * 20 + 5/90 * 100
        self.assertEqual(result.delay_risk_percent, 12)
        self.assertEqual(result.recommendations, [])

    def test_single_matching_project_warns_and_flags_low_confidence(self):
        request = EstimationRequest(project_type="résidentiel", surface_area=200)
        with self.assertWarns(DegenerateInputWarning):
            result = estimate(request, _three_projects())
        self.assertTrue(result.low_confidence)

    def test_several_matching_projects_are_averaged(self):
        request = EstimationRequest(project_type="commercial", surface_area=400)
        with warnings.catch_warnings():
            warnings.simplefilter("error", DegenerateInputWarning)
            result = estimate(request, sample_projects())

        # means: surface 400, materials 67.5M, labor 40M, duration 165, delay 13.5
        self.assertEqual(result.sample_size, 2)
        self.assertFalse(result.low_confidence)
        self.assertEqual(result.materials_cost_estimate, 67_500_000)
        self.assertEqual(result.labor_cost_estimate, 40_000_000)
        self.assertEqual(result.duration_estimate_days, 165)
        self.assertEqual(result.delay_risk_percent, 8)

    def test_weather_factors_and_recommendations(self):
        request = EstimationRequest(
            project_type="commercial",
            surface_area=600,
            worker_count=20,
            average_temperature=36,
            rain_days=12,
        )
        result = _quiet_estimate(request, _three_projects())

        expected_materials = round(80_000_000 * (600 / 500) * 1.10 * 1.15)
        self.assertAlmostEqual(result.materials_cost_estimate, expected_materials, delta=1)
        # 12/10 * 20 + 15 + 15/180 * 100
        self.assertEqual(result.delay_risk_percent, 47)
        self.assertEqual(
            result.recommendations,
            [REC_RAIN, REC_HEAT, REC_LARGE_SURFACE, REC_RISK_MARGIN],
        )

    def test_risk_is_clamped_to_100(self):
        request = EstimationRequest(
            project_type="commercial", surface_area=500, rain_days=200
        )
        result = _quiet_estimate(request, _three_projects())
        self.assertEqual(result.delay_risk_percent, 100)

    def test_zero_surface_gives_zero_costs(self):
        request = EstimationRequest(project_type="industriel", surface_area=0)
        result = _quiet_estimate(request, _three_projects())
        self.assertEqual(result.total_cost, 0)
        self.assertEqual(result.duration_estimate_days, 0)

    def test_type_match_is_exact(self):
        request = EstimationRequest(project_type="Résidentiel", surface_area=150)
        result = _quiet_estimate(request, _three_projects())
        self.assertTrue(result.fallback)

    def test_estimate_is_deterministic(self):
        request = EstimationRequest(
            project_type="industriel", surface_area=800, worker_count=20, rain_days=7
        )
        first = _quiet_estimate(request, sample_projects(), EstimatorOptions.rich())
        second = _quiet_estimate(request, sample_projects(), EstimatorOptions.rich())
        self.assertEqual(first, second)


class TestEstimateFallback(unittest.TestCase):
    def test_unknown_type_uses_all_projects(self):
        request = EstimationRequest(
            project_type="hangar",
            surface_area=1100,
            average_temperature=40,
            rain_days=20,
        )
        result = estimate(request, _three_projects())

        # mean surface 550 -> factor 2, no weather multipliers
        self.assertTrue(result.fallback)
        self.assertEqual(result.sample_size, 3)
        self.assertEqual(result.materials_cost_estimate, 170_000_000)
        self.assertEqual(result.labor_cost_estimate, 93_333_333)
        self.assertEqual(result.duration_estimate_days, 340)
        self.assertEqual(result.delay_risk_percent, 25)
        self.assertEqual(result.recommendations, [REC_FALLBACK])

    def test_empty_history_raises(self):
        request = EstimationRequest(project_type="résidentiel", surface_area=100)
        with self.assertRaises(InsufficientDataError) as ctx:
            estimate(request, [])
        self.assertEqual(ctx.exception.code, ErrorCode.INSUFFICIENT_DATA)
        self.assertEqual(ctx.exception.to_dict()["details"], {"project_type": "résidentiel"})


class TestRichVariant(unittest.TestCase):
    def test_worker_scaling_changes_labor_and_duration(self):
        request = EstimationRequest(
            project_type="résidentiel",
            surface_area=200,
            worker_count=10,
            average_temperature=26,
            rain_days=3,
        )
        result = _quiet_estimate(request, _three_projects(), EstimatorOptions.rich())

        # worker factor 10/8
        self.assertAlmostEqual(result.materials_cost_estimate, 33_333_333, delta=1)
        self.assertAlmostEqual(result.labor_cost_estimate, 25_000_000, delta=1)
        self.assertEqual(result.duration_estimate_days, 96)
        # 3/10 * 15 + 5/90 * 100
        self.assertEqual(result.delay_risk_percent, 10)

    def test_zero_workers_leaves_factor_neutral(self):
        request = EstimationRequest(project_type="résidentiel", surface_area=150)
        result = _quiet_estimate(request, _three_projects(), EstimatorOptions.rich())
        self.assertEqual(result.labor_cost_estimate, 15_000_000)
        self.assertEqual(result.duration_estimate_days, 90)

    def test_floors_apply(self):
        request = EstimationRequest(project_type="résidentiel", surface_area=10)
        result = _quiet_estimate(
            request, _three_projects(), EstimatorOptions.rich()
        )
        self.assertEqual(result.duration_estimate_days, 30)
        self.assertGreaterEqual(result.delay_risk_percent, 5)

    def test_extra_recommendations(self):
        request = EstimationRequest(
            project_type="industriel", surface_area=1000, worker_count=5
        )
        result = _quiet_estimate(request, _three_projects(), EstimatorOptions.rich())
        self.assertIn(REC_SMALL_CREW, result.recommendations)
        self.assertIn(REC_LONG_PROJECT, result.recommendations)
        self.assertEqual(result.recommendations[-2:], [REC_SMALL_CREW, REC_LONG_PROJECT])

    def test_simple_variant_omits_extra_recommendations(self):
        request = EstimationRequest(
            project_type="industriel", surface_area=1000, worker_count=5
        )
        result = _quiet_estimate(request, _three_projects())
        self.assertNotIn(REC_SMALL_CREW, result.recommendations)
        self.assertNotIn(REC_LONG_PROJECT, result.recommendations)


class TestProperties(unittest.TestCase):
    def _requests(self):
        for project_type in ("résidentiel", "commercial", "industriel", "hangar"):
            for surface in (1, 150, 480, 2500):
                for temperature in (10, 25, 33, 41):
                    for rain in (0, 7, 15, 60):
                        yield EstimationRequest(
                            project_type=project_type,
                            surface_area=surface,
                            worker_count=6,
                            average_temperature=temperature,
                            rain_days=rain,
                        )

    def test_total_and_risk_range_hold_for_every_request(self):
        for options in (EstimatorOptions.simple(), EstimatorOptions.rich()):
            for request in self._requests():
                result = _quiet_estimate(request, sample_projects(), options)
                self.assertEqual(
                    result.total_cost,
                    result.materials_cost_estimate + result.labor_cost_estimate,
                )
                self.assertGreaterEqual(result.delay_risk_percent, 0)
                self.assertLessEqual(result.delay_risk_percent, 100)

    def test_heavy_rain_never_lowers_costs_or_risk(self):
        for options in (EstimatorOptions.simple(), EstimatorOptions.rich()):
            for project_type in ("résidentiel", "commercial", "industriel"):
                dry = EstimationRequest(
                    project_type=project_type, surface_area=300, worker_count=10, rain_days=4
                )
                wet = dry.model_copy(update={"rain_days": 14})
                dry_result = _quiet_estimate(dry, sample_projects(), options)
                wet_result = _quiet_estimate(wet, sample_projects(), options)
                self.assertGreaterEqual(
                    wet_result.materials_cost_estimate, dry_result.materials_cost_estimate
                )
                self.assertGreaterEqual(
                    wet_result.labor_cost_estimate, dry_result.labor_cost_estimate
                )
                self.assertGreaterEqual(
                    wet_result.delay_risk_percent, dry_result.delay_risk_percent
                )

    def test_history_is_not_mutated(self):
        history = sample_projects()
        request = EstimationRequest(project_type="commercial", surface_area=350)
        _quiet_estimate(request, history, EstimatorOptions.rich())
        self.assertEqual(history, sample_projects())


class TestFactors(unittest.TestCase):
    def test_temperature_bands_are_strict(self):
        self.assertEqual(temperature_factor(30), 1.0)
        self.assertEqual(temperature_factor(30.5), 1.10)
        self.assertEqual(temperature_factor(20), 1.0)
        self.assertEqual(temperature_factor(19), 0.95)

    def test_rain_bands_are_strict(self):
        self.assertEqual(rain_factor(5), 1.0)
        self.assertEqual(rain_factor(6), 1.05)
        self.assertEqual(rain_factor(10), 1.05)
        self.assertEqual(rain_factor(11), 1.15)


class TestExtremeInputs(unittest.TestCase):
    def test_overflowing_surface_gives_zero_amounts(self):
        for project_type in ("commercial", "hangar"):
            request = EstimationRequest(project_type=project_type, surface_area=1e305)
            result = _quiet_estimate(request, sample_projects())
            self.assertEqual(result.materials_cost_estimate, 0)
            self.assertEqual(result.labor_cost_estimate, 0)
            self.assertEqual(result.total_cost, 0)
            self.assertGreaterEqual(result.delay_risk_percent, 0)
            self.assertLessEqual(result.delay_risk_percent, 100)

    def test_overflowing_surface_with_rich_options(self):
        request = EstimationRequest(
            project_type="commercial", surface_area=1e305, worker_count=12
        )
        result = _quiet_estimate(request, sample_projects(), EstimatorOptions.rich())
        self.assertEqual(result.total_cost, 0)
        self.assertIsInstance(result.duration_estimate_days, int)
        self.assertGreaterEqual(result.duration_estimate_days, 30)

    def test_huge_worker_count_is_treated_as_neutral(self):
        huge = EstimationRequest(
            project_type="résidentiel", surface_area=150, worker_count=10**400
        )
        none = EstimationRequest(project_type="résidentiel", surface_area=150)
        options = EstimatorOptions.rich()
        huge_result = _quiet_estimate(huge, _three_projects(), options)
        none_result = _quiet_estimate(none, _three_projects(), options)
        self.assertEqual(huge_result.labor_cost_estimate, none_result.labor_cost_estimate)
        self.assertEqual(
            huge_result.duration_estimate_days, none_result.duration_estimate_days
        )

    def test_helpers_absorb_overflow(self):
        self.assertEqual(_safe_ratio(10**400, 8.0), 0.0)
        self.assertEqual(_safe_ratio(1e308, 1e-10), 0.0)
        self.assertEqual(_safe_ratio(3, 0), 0.0)
        self.assertEqual(_whole(float("inf")), 0)
        self.assertEqual(_whole(float("nan")), 0)
        self.assertEqual(_whole(2.6), 3)


if __name__ == "__main__":
    unittest.main()
